# processors/errors.py
"""
Error taxonomy for the QR pipeline.

Every error is terminal for the request. The pipeline tags errors with the
stage that raised them ("encode" or "watermark") so the HTTP layer and the
CLI can build a message with context.
"""

from typing import Optional


class QRError(Exception):
    """Base de todos los errores del pipeline."""

    stage: Optional[str] = None


class ValidationError(QRError):
    """Campos del formulario ausentes o inválidos."""


class DecodeError(QRError):
    def __init__(self, which: str, reason: Optional[str] = None):
        self.which = which
        self.reason = reason
        message = f"could not decode {which} image"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class UnsupportedFormatError(QRError):
    def __init__(self, content_type: str, expected: str = "image/png"):
        self.content_type = content_type
        self.expected = expected
        super().__init__(f"unsupported image type {content_type}, expected {expected}")


class UpstreamEncodeError(QRError):
    """El codificador QR rechazó el contenido o el tamaño."""


class ResampleError(QRError, ValueError):
    """Petición de redimensionado degenerada (ancho 0)."""
