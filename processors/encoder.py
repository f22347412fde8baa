# processors/encoder.py
import logging

import qrcode
from qrcode.exceptions import DataOverflowError
from PIL import Image

from . import to_png_bytes
from .errors import UpstreamEncodeError

logger = logging.getLogger("encoder")

ERROR_LEVELS = {
    "Low": qrcode.constants.ERROR_CORRECT_L,
    "Medium": qrcode.constants.ERROR_CORRECT_M,
    "Quartile": qrcode.constants.ERROR_CORRECT_Q,
    "High": qrcode.constants.ERROR_CORRECT_H,
}

MAX_CONTENT_LENGTH = 7089
QUIET_ZONE = 4


def _build(content: str, error_correction: str) -> qrcode.QRCode:
    try:
        level = ERROR_LEVELS[error_correction]
    except KeyError:
        raise UpstreamEncodeError(f"unknown error correction level: {error_correction}") from None

    qr = qrcode.QRCode(error_correction=level, box_size=1, border=QUIET_ZONE)
    qr.add_data(content)
    try:
        qr.make(fit=True)
    except (DataOverflowError, ValueError) as e:
        raise UpstreamEncodeError(f"content too long: {e}") from e
    return qr


def encode(content: str, error_correction: str, size: int) -> bytes:
    """
    Genera un código QR como PNG de `size` x `size` píxeles.

    Cada módulo ocupa el mayor número entero de píxeles que cabe y el símbolo
    queda centrado sobre fondo blanco. Si `size` es menor que el símbolo con
    su zona de silencio, se devuelve la imagen mínima (1 px por módulo).
    """
    if not content:
        raise UpstreamEncodeError("no content to encode")
    if len(content) > MAX_CONTENT_LENGTH:
        raise UpstreamEncodeError(
            f"content length {len(content)} exceeds {MAX_CONTENT_LENGTH} characters"
        )
    if size <= 0:
        raise UpstreamEncodeError(f"size must be positive, got {size}")

    qr = _build(content, error_correction)
    modules = qr.modules_count + 2 * QUIET_ZONE
    if size < modules:
        logger.debug("Requested size %s below symbol size %s", size, modules)
        size = modules

    qr.box_size = size // modules
    symbol = qr.make_image(fill_color="black", back_color="white").convert("L")

    canvas = Image.new("L", (size, size), 255)
    pad = (size - symbol.width) // 2
    canvas.paste(symbol, (pad, pad))
    return to_png_bytes(canvas)
