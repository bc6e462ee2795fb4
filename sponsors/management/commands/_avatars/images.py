"""
Avatar raster helpers (Pillow / CairoSVG).

Covers the rounding transform applied to every sponsor avatar, SVG rasterization for rendered
sponsor walls, and the base64 / data-URI encoders used to embed the results.
"""

import base64
from io import BytesIO
from pathlib import Path

from PIL import Image, ImageChops, ImageDraw, ImageOps


#: Prefix of every PNG data URI produced by :func:`png_to_data_uri`.
PNG_DATA_URI_PREFIX = "data:image/png;base64,"

#: Density (DPI) used when rasterizing SVG markup; CSS pixels are defined at 72 DPI here.
SVG_DENSITY = 150
_SVG_BASE_DENSITY = 72


# ---------------------------------------------------------------------------
# Rounding transform
# ---------------------------------------------------------------------------


def round_image(image: bytes | str | Path, radius: float = 0.5, size: int = 100) -> bytes:
    """
    Resize *image* to a ``size`` x ``size`` square and clip it to a rounded rectangle.

    The source is scaled to cover the square and center-cropped. Pixels outside a rectangle
    with corner radius ``size * radius`` become fully transparent, so ``radius=0.5`` yields a
    circle. Returns the result encoded as PNG.

    *image* is either raw encoded bytes or a path to a local image file.
    """
    source = BytesIO(image) if isinstance(image, bytes) else Path(image)
    with Image.open(source) as src:
        fitted = ImageOps.fit(
            src.convert("RGBA"),
            (size, size),
            Image.Resampling.LANCZOS,
            centering=(0.5, 0.5),
        )

    mask = Image.new("L", (size, size), 0)
    ImageDraw.Draw(mask).rounded_rectangle(
        (0, 0, size - 1, size - 1),
        radius=round(size * radius),
        fill=255,
    )
    # Keep only the source alpha inside the mask (destination-in)
    fitted.putalpha(ImageChops.multiply(fitted.getchannel("A"), mask))

    buf = BytesIO()
    fitted.save(buf, format="PNG", compress_level=8)
    return buf.getvalue()


# ---------------------------------------------------------------------------
# SVG rasterization
# ---------------------------------------------------------------------------


def svg_to_png(svg: str) -> bytes:
    """Rasterize SVG markup to PNG at :data:`SVG_DENSITY` DPI."""
    import cairosvg  # noqa: PLC0415

    rendered = cairosvg.svg2png(
        bytestring=svg.encode("utf-8"),
        dpi=_SVG_BASE_DENSITY,
        scale=SVG_DENSITY / _SVG_BASE_DENSITY,
    )
    with Image.open(BytesIO(rendered)) as img:
        buf = BytesIO()
        img.save(buf, format="PNG", optimize=True, dpi=(SVG_DENSITY, SVG_DENSITY))
    return buf.getvalue()


# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------


def bytes_to_base64(data: bytes) -> str:
    """Encode *data* with the standard base64 alphabet."""
    return base64.b64encode(data).decode("ascii")


def base64_to_bytes(encoded: str) -> bytes:
    """
    Decode standard base64 produced by :func:`bytes_to_base64`.

    Raises :class:`binascii.Error` on characters outside the alphabet or bad padding.
    """
    return base64.b64decode(encoded, validate=True)


def png_to_data_uri(png: bytes) -> str:
    """Embed *png* as a ``data:image/png;base64,...`` URI."""
    return PNG_DATA_URI_PREFIX + bytes_to_base64(png)
