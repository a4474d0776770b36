"""Portable pixmap (PPM) writers.

Plain PPM (P3) is ASCII: a ``P3`` magic line, ``<width> <height>``, the
maximum channel value ``255``, then one ``r g b`` triple per line in row-major
order from the top-left pixel. Binary PPM (P6) has the same header followed
by raw bytes.

Example:
    >>> import io
    >>> out = io.StringIO()
    >>> write_ppm(out, 1, 1, [[Color(1.0, 0.0, 0.0)]])
    >>> out.getvalue()
    'P3\\n1 1\\n255\\n255 0 0\\n'
"""

from collections.abc import Iterable
from typing import BinaryIO, TextIO

from rtweekend.core.color import Color

MAX_CHANNEL_VALUE = 255


def format_header(width: int, height: int, binary: bool = False) -> str:
    magic = "P6" if binary else "P3"
    return f"{magic}\n{width} {height}\n{MAX_CHANNEL_VALUE}\n"


def write_header(out: TextIO, width: int, height: int) -> None:
    out.write(format_header(width, height))


def write_pixels(out: TextIO, colors: Iterable[Color]) -> None:
    """Write one ``r g b`` line per color."""
    out.write("".join(f"{color}\n" for color in colors))


def write_ppm(out: TextIO, width: int, height: int, rows: Iterable[Iterable[Color]]) -> None:
    """Write a complete P3 image.

    Args:
        out: Text stream to write to.
        width: Image width in pixels.
        height: Image height in pixels.
        rows: Rows of colors, top row first.
    """
    write_header(out, width, height)
    for row in rows:
        write_pixels(out, row)


def write_header_binary(out: BinaryIO, width: int, height: int) -> None:
    out.write(format_header(width, height, binary=True).encode("ascii"))


def write_pixels_binary(out: BinaryIO, colors: Iterable[Color]) -> None:
    out.write(b"".join(color.to_bytes() for color in colors))


def write_ppm_binary(
    out: BinaryIO, width: int, height: int, rows: Iterable[Iterable[Color]]
) -> None:
    """Write a complete P6 image to a binary stream."""
    write_header_binary(out, width, height)
    for row in rows:
        write_pixels_binary(out, row)


def gradient_rows(width: int, height: int):
    """Yield the rows of a test gradient, top row first.

    Red ramps left to right, green bottom to top, blue stays at 0.25. No
    tracing is involved, which makes the image useful for checking sinks.

    Channels are snapped to floor(255 * c) / 255 so that the usual
    serialization (floor(c * 255.999)) prints floor(255 * c).
    """
    for j in range(height - 1, -1, -1):
        g = _snap(j / max(height - 1, 1))
        yield [Color(_snap(i / max(width - 1, 1)), g, _snap(0.25)) for i in range(width)]


def _snap(c: float) -> float:
    return int(MAX_CHANNEL_VALUE * c) / MAX_CHANNEL_VALUE
