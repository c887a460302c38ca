"""Identity provider backed by a fixed, settable session."""


class StaticIdentityProvider:
    """Identity provider whose session is set by the caller.

    This class satisfies the IdentityProvider protocol through structural
    typing - no explicit inheritance needed.
    """

    def __init__(self, viewer_id: str | None = None, resolved: bool = True) -> None:
        self._viewer_id = viewer_id
        self._resolved = resolved

    @classmethod
    def pending(cls) -> "StaticIdentityProvider":
        """A provider whose session lookup has not finished yet."""
        return cls(resolved=False)

    def resolve(self, viewer_id: str | None) -> None:
        """Finish the session lookup; None resolves to anonymous."""
        self._viewer_id = viewer_id
        self._resolved = True

    def is_resolved(self) -> bool:
        return self._resolved

    def viewer_id(self) -> str | None:
        return self._viewer_id if self._resolved else None
