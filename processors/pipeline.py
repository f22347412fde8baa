# processors/pipeline.py
"""
Request pipeline: encode the QR code, then optionally center a watermark on it.

Shared by the HTTP server (qr_server.py) and the CLI (generate_qr.py).
"""

import logging
from typing import Any, Dict, Optional

from . import compositor, encoder
from .errors import QRError

logger = logging.getLogger("pipeline")

ERROR_CORRECTION = "Medium"


def generate(content: str, size: int, watermark: Optional[bytes] = None,
             config: Optional[Dict[str, Any]] = None) -> bytes:
    config = config or {}
    centering = (config.get("overlay", {}) or {}).get("centering", "center")

    try:
        code = encoder.encode(content, ERROR_CORRECTION, size)
    except QRError as e:
        e.stage = "encode"
        raise

    if watermark is None:
        logger.info("Generated QR code (size=%s) without watermark", size)
        return code

    try:
        return compositor.compose(code, watermark, centering=centering)
    except QRError as e:
        e.stage = "watermark"
        raise
