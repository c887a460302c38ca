"""
Tests for the image load memo.
"""

import pytest

from swr_cache import ImageIdentity, ImageLoadMemo
from swr_cache.repositories import RecentFetchProbe
from swr_cache.utils import SHIMMER_PLACEHOLDERS

URL_A = "https://happy-cat-123.convex.cloud/api/storage/xyz?token=aaa"
URL_B = "https://happy-cat-123.convex.cloud/api/storage/xyz?token=bbb"
OTHER = "https://cdn.example.com/avatars/anna.png"


class ExplodingProbe:
    """Probe whose platform API is unavailable."""

    def __init__(self):
        self.calls = 0

    def is_cached(self, url: str) -> bool:
        self.calls += 1
        raise RuntimeError("image API disabled")


class CountingProbe:
    """Probe that records calls and never reports a hit."""

    def __init__(self):
        self.calls = 0

    def is_cached(self, url: str) -> bool:
        self.calls += 1
        return False


def test_identity_extracts_storage_id():
    """Content addresses are parsed from storage URLs only."""
    assert ImageIdentity.from_url(URL_A, r"/api/storage/([^/?]+)").storage_id == "xyz"
    assert ImageIdentity.from_url(OTHER, r"/api/storage/([^/?]+)").storage_id is None


def test_empty_url_counts_as_loaded():
    """Nothing to load means nothing to wait for."""
    memo = ImageLoadMemo()
    assert memo.is_loaded(None) is True
    assert memo.is_loaded("") is True


def test_unknown_url_is_not_loaded():
    memo = ImageLoadMemo()
    assert memo.is_loaded(URL_A) is False


def test_marked_url_is_loaded():
    memo = ImageLoadMemo()
    memo.mark_loaded(OTHER)
    assert memo.is_loaded(OTHER) is True


def test_mark_loaded_is_idempotent():
    memo = ImageLoadMemo()
    memo.mark_loaded(URL_A)
    memo.mark_loaded(URL_A)

    assert len(memo) == 1
    assert memo.urls_for("xyz") == [URL_A]


def test_rotated_url_recognized_without_probe():
    """Same content address, new signed URL: loaded, and no probe call."""
    probe = CountingProbe()
    memo = ImageLoadMemo(probe=probe)
    memo.mark_loaded(URL_A)

    assert memo.is_loaded(URL_B) is True
    assert probe.calls == 0
    assert memo.urls_for("xyz") == [URL_A, URL_B]


def test_url_without_storage_id_falls_back_to_probe():
    """Non-matching URLs skip the content-address tier."""
    probe = CountingProbe()
    memo = ImageLoadMemo(probe=probe)

    assert memo.is_loaded(OTHER) is False
    assert probe.calls == 1


def test_probe_error_means_not_loaded():
    """A failing probe is treated as a miss."""
    probe = ExplodingProbe()
    memo = ImageLoadMemo(probe=probe)

    assert memo.is_loaded(OTHER) is False
    assert probe.calls == 1


def test_probe_hit_is_remembered(clock):
    """A probe hit is recorded so later checks skip the probe."""
    probe = RecentFetchProbe(grace_ms=30_000, clock=clock)
    memo = ImageLoadMemo(probe=probe)
    probe.record_fetch(URL_A)

    assert memo.is_loaded(URL_A) is True
    clock.advance(60_000)
    assert probe.is_cached(URL_A) is False
    assert memo.is_loaded(URL_A) is True
    assert memo.is_loaded(URL_B) is True


def test_recent_fetch_probe_grace_window(clock):
    """Fetches count as cached only within the grace window."""
    probe = RecentFetchProbe(grace_ms=1000, clock=clock)
    assert probe.is_cached(OTHER) is False

    probe.record_fetch(OTHER)
    clock.advance(1000)
    assert probe.is_cached(OTHER) is True
    clock.advance(1)
    assert probe.is_cached(OTHER) is False


def test_custom_storage_pattern():
    """The content-address pattern is configurable."""
    memo = ImageLoadMemo(storage_id_pattern=r"/blobs/(\w+)")
    memo.mark_loaded("https://a.example/blobs/abc?v=1")

    assert memo.is_loaded("https://b.example/blobs/abc?v=2") is True


def test_placeholder_only_until_loaded():
    """A shimmer is offered until the image has been shown once."""
    memo = ImageLoadMemo()

    assert memo.placeholder_for(URL_A, "video") == SHIMMER_PLACEHOLDERS["video"]
    memo.mark_loaded(URL_A)
    assert memo.placeholder_for(URL_B, "video") is None


def test_placeholder_unknown_aspect():
    with pytest.raises(KeyError):
        ImageLoadMemo().placeholder_for(URL_A, "panorama")
