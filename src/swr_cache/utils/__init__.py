"""Pure helpers with no I/O."""

from .clock import Clock, now_ms
from .keys import ANONYMOUS, SEPARATOR, derive_key, parse_key
from .placeholders import SHIMMER_PLACEHOLDERS, generate_shimmer_data_url

__all__ = [
    "Clock",
    "now_ms",
    "ANONYMOUS",
    "SEPARATOR",
    "derive_key",
    "parse_key",
    "SHIMMER_PLACEHOLDERS",
    "generate_shimmer_data_url",
]
