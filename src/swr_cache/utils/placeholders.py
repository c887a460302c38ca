"""Shimmer placeholders shown while an image is not yet loaded."""

import base64

_SHIMMER_SVG = """
    <svg width="{width}" height="{height}" version="1.1" xmlns="http://www.w3.org/2000/svg" xmlns:xlink="http://www.w3.org/1999/xlink">
      <defs>
        <linearGradient id="shimmer-gradient">
          <stop stop-color="#f3f4f6" offset="20%" />
          <stop stop-color="#e5e7eb" offset="50%" />
          <stop stop-color="#f3f4f6" offset="70%" />
        </linearGradient>
      </defs>
      <rect width="{width}" height="{height}" fill="#f3f4f6" />
      <rect id="shimmer-rect" width="{width}" height="{height}" fill="url(#shimmer-gradient)" opacity="0.5" />
    </svg>"""


def generate_shimmer_data_url(width: int = 400, height: int = 300) -> str:
    """Build a base64 SVG data URL usable as a blur placeholder.

    Args:
        width: Placeholder width in pixels
        height: Placeholder height in pixels

    Returns:
        ``data:image/svg+xml;base64,...`` string
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Placeholder size must be positive, got {width}x{height}")

    svg = _SHIMMER_SVG.format(width=width, height=height)
    encoded = base64.b64encode(svg.encode("utf-8")).decode("ascii")
    return f"data:image/svg+xml;base64,{encoded}"


SHIMMER_PLACEHOLDERS: dict[str, str] = {
    "square": generate_shimmer_data_url(400, 400),
    "video": generate_shimmer_data_url(400, 225),  # 16:9
    "portrait": generate_shimmer_data_url(300, 400),
    "landscape": generate_shimmer_data_url(600, 400),
}
