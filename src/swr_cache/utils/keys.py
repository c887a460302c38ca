"""Cache key derivation.

Keys scope an entry to one (resource, viewer) pair so viewer-relative fields
such as "is following" are never served to a different viewer. Plain
identifiers produce ``"<resource>:<viewer>"`` with ``"anon"`` standing in for
an absent viewer. Backslash escaping keeps the mapping injective when either
part contains the separator, and a viewer literally named ``anon`` is written
as ``\\anon`` so it cannot collide with the anonymous sentinel.
"""

from swr_cache.exceptions import InvalidCacheKeyError

SEPARATOR = ":"
ANONYMOUS = "anon"
ESCAPE = "\\"

_ESCAPED_ANONYMOUS = ESCAPE + ANONYMOUS


def _escape(part: str) -> str:
    return part.replace(ESCAPE, ESCAPE * 2).replace(SEPARATOR, ESCAPE + SEPARATOR)


def _unescape(key: str, raw: str) -> str:
    out: list[str] = []
    i = 0
    while i < len(raw):
        char = raw[i]
        if char == ESCAPE:
            if i + 1 >= len(raw) or raw[i + 1] not in (ESCAPE, SEPARATOR):
                raise InvalidCacheKeyError(key, f"dangling escape at offset {i}")
            out.append(raw[i + 1])
            i += 2
            continue
        if char == SEPARATOR:
            raise InvalidCacheKeyError(key, "unescaped separator")
        out.append(char)
        i += 1
    return "".join(out)


def derive_key(resource_id: str, viewer_id: str | None = None) -> str:
    """Derive the cache key for a resource as seen by a viewer.

    Args:
        resource_id: Identity of the cached resource (username, post id, ...)
        viewer_id: Identity of the current viewer, or None when anonymous

    Returns:
        A key that is equal for equal inputs and distinct for distinct inputs

    Raises:
        ValueError: If resource_id is empty
    """
    if not resource_id:
        raise ValueError("resource_id must not be empty")

    if viewer_id is None:
        viewer = ANONYMOUS
    elif viewer_id == ANONYMOUS:
        viewer = _ESCAPED_ANONYMOUS
    else:
        viewer = _escape(viewer_id)

    return f"{_escape(resource_id)}{SEPARATOR}{viewer}"


def parse_key(key: str) -> tuple[str, str | None]:
    """Split a key produced by ``derive_key`` back into its parts.

    Raises:
        InvalidCacheKeyError: If the key could not have come from derive_key
    """
    i = 0
    while i < len(key):
        if key[i] == ESCAPE:
            i += 2
        elif key[i] == SEPARATOR:
            break
        else:
            i += 1
    else:
        raise InvalidCacheKeyError(key, "missing separator")

    raw_resource, raw_viewer = key[:i], key[i + 1 :]
    if not raw_resource:
        raise InvalidCacheKeyError(key, "empty resource part")

    resource_id = _unescape(key, raw_resource)
    if raw_viewer == ANONYMOUS:
        return resource_id, None
    if raw_viewer == _ESCAPED_ANONYMOUS:
        return resource_id, ANONYMOUS
    return resource_id, _unescape(key, raw_viewer)
