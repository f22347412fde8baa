# processors/compositor.py
"""
Centers a watermark image on a QR code raster.

The watermark is shrunk to a quarter of the code width with the Lanczos
resampler and alpha-composited ("over") onto a fresh copy of the code.
Error correction level Medium tolerates losing roughly that much area.
"""

import io
import logging
from typing import Tuple

from PIL import Image, UnidentifiedImageError

from . import PNG_MIME, ensure_rgba, to_png_bytes
from .errors import DecodeError, UnsupportedFormatError
from .resample import resize
from .sniff import sniff_content_type

logger = logging.getLogger("compositor")

OVERLAY_RATIO = 0.25

# "center": cada eje con su propia dimensión
# "square": ambos ejes con el ancho de la base (comportamiento histórico)
CENTERING_MODES = ("center", "square")


def decode(data: bytes, which: str) -> Image.Image:
    """
    Decodifica un PNG completo. `which` identifica la imagen en el error.
    """
    try:
        img = Image.open(io.BytesIO(data), formats=["PNG"])
        img.load()
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError, Image.DecompressionBombError) as e:
        raise DecodeError(which, str(e)) from e
    return img


def encode(img: Image.Image) -> bytes:
    return to_png_bytes(img)


def overlay_target_width(base_width: int) -> int:
    return int(base_width * OVERLAY_RATIO)


def placement(base_size, overlay_size, centering: str = "center") -> Tuple[int, int]:
    """
    Calcula la esquina superior izquierda (x, y) del overlay centrado.
    """
    bw, bh = base_size
    ow, oh = overlay_size
    x = bw // 2 - ow // 2
    if centering == "square":
        return (x, x)
    if centering != "center":
        raise ValueError(f"unknown centering mode: {centering!r}")
    return (x, bh // 2 - oh // 2)


def blend(base: Image.Image, overlay: Image.Image, offset: Tuple[int, int]) -> Image.Image:
    """
    Compone `overlay` sobre una copia de `base` en `offset`.

    La base se copia opaca sobre un lienzo nuevo y el overlay se mezcla con
    el operador "over". Los píxeles que caen fuera del lienzo se descartan.
    Ninguna de las imágenes de entrada se modifica.
    """
    canvas = Image.new("RGBA", base.size)
    canvas.paste(ensure_rgba(base), (0, 0))

    ox, oy = offset
    x0, y0 = max(ox, 0), max(oy, 0)
    x1 = min(ox + overlay.width, canvas.width)
    y1 = min(oy + overlay.height, canvas.height)
    if x0 >= x1 or y0 >= y1:
        logger.debug("Overlay at %s falls outside %sx%s canvas", offset, canvas.width, canvas.height)
        return canvas

    visible = ensure_rgba(overlay).crop((x0 - ox, y0 - oy, x1 - ox, y1 - oy))
    canvas.alpha_composite(visible, (x0, y0))
    return canvas


def compose(base_bytes: bytes, overlay_bytes: bytes, centering: str = "center") -> bytes:
    """
    Superpone el overlay (PNG) centrado sobre la base (PNG) y devuelve PNG.

    El tipo del overlay se comprueba sobre los bytes crudos antes de
    decodificar nada; si la base no decodifica, el overlay no se toca.
    """
    content_type = sniff_content_type(overlay_bytes)
    if content_type != PNG_MIME:
        raise UnsupportedFormatError(content_type, PNG_MIME)

    base = decode(base_bytes, "base")
    overlay = decode(overlay_bytes, "overlay")

    target_w = overlay_target_width(base.width)
    overlay = resize(overlay, target_w)
    offset = placement(base.size, overlay.size, centering)
    logger.info(
        "Blending %sx%s overlay onto %sx%s base at %s",
        overlay.width, overlay.height, base.width, base.height, offset,
    )

    return encode(blend(base, overlay, offset))
