"""
Tests for shimmer placeholder generation.
"""

import base64

import pytest

from swr_cache.utils import SHIMMER_PLACEHOLDERS, generate_shimmer_data_url


def test_data_url_contains_svg_of_requested_size():
    url = generate_shimmer_data_url(640, 360)

    prefix = "data:image/svg+xml;base64,"
    assert url.startswith(prefix)
    svg = base64.b64decode(url[len(prefix) :]).decode("utf-8")
    assert 'width="640"' in svg
    assert 'height="360"' in svg
    assert "shimmer-gradient" in svg


def test_standard_shapes():
    assert set(SHIMMER_PLACEHOLDERS) == {"square", "video", "portrait", "landscape"}
    assert SHIMMER_PLACEHOLDERS["video"] == generate_shimmer_data_url(400, 225)


@pytest.mark.parametrize("size", [(0, 10), (10, -1)])
def test_rejects_non_positive_size(size):
    with pytest.raises(ValueError):
        generate_shimmer_data_url(*size)
