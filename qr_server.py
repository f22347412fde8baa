# qr_server.py
"""
HTTP service that generates QR codes, optionally with a centered watermark.

Endpoints:
- POST /generate  (form fields: content, size, optional file "watermark")
    200 image/png on success
    400 {"error": "..."} on invalid input or pipeline failure
- GET /health

The watermark must be a PNG; it is scaled to a quarter of the code width and
centered on it (see processors/compositor.py).
"""
import os
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from flask import Flask, Response, request, jsonify
from werkzeug.exceptions import RequestEntityTooLarge

from config_loader import load_config
from dotenv import load_dotenv
load_dotenv()  # take environment variables from .env.

from processors import PNG_MIME
from processors.errors import QRError, UnsupportedFormatError, ValidationError
from processors.pipeline import generate as generate_code

# ------------------------------------------------------------------------------
# Configuración básica
# ------------------------------------------------------------------------------
config = load_config(os.getenv("QR_SETTINGS", "settings.json"))
SERVER = config.get("server", {})

LOG_LEVEL = (config.get("logging", {}) or {}).get("level", "INFO").upper()
logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(message)s")
logger = logging.getLogger("qr_server")

WATERMARK_FIELD = "watermark"

# ------------------------------------------------------------------------------
# App
# ------------------------------------------------------------------------------
app = Flask(__name__)
app.config["MAX_CONTENT_LENGTH"] = int(SERVER.get("max_upload_bytes", 10 << 20))

# ------------------------------------------------------------------------------
# Extracción de campos
# ------------------------------------------------------------------------------
class UploadState(Enum):
    PRESENT = "present"
    ABSENT = "absent"
    MALFORMED = "malformed"

@dataclass
class Upload:
    state: UploadState
    data: bytes = b""
    reason: str = ""

def extract_upload(files, field: str) -> Upload:
    """
    Lee el archivo opcional `field` del formulario.
      - ABSENT: no se envió el campo (o se envió vacío y sin nombre)
      - MALFORMED: se envió pero no se pudo leer o está vacío
      - PRESENT: bytes completos del archivo
    """
    storage = files.get(field)
    if storage is None:
        return Upload(UploadState.ABSENT)
    try:
        data = storage.read()
    except OSError as e:
        return Upload(UploadState.MALFORMED, reason=str(e))
    if not data:
        if not storage.filename:
            return Upload(UploadState.ABSENT)
        return Upload(UploadState.MALFORMED, reason=f"{storage.filename} is empty.")
    return Upload(UploadState.PRESENT, data=data)

def parse_content(raw: Optional[str]) -> str:
    if not raw:
        raise ValidationError("Could not determine the desired QR code content.")
    return raw

def parse_size(raw: Optional[str], max_size: int) -> int:
    try:
        size = int((raw or "").strip())
    except ValueError:
        raise ValidationError("Could not determine the desired QR code size.") from None
    if size <= 0 or size > max_size:
        raise ValidationError("Could not determine the desired QR code size.")
    return size

def error_response(message: str, status: int = 400):
    return jsonify({"error": message}), status

def pipeline_error_message(err: QRError) -> str:
    if isinstance(err, UnsupportedFormatError):
        return f"Provided watermark image is a {err.content_type} not a PNG."
    if err.stage == "encode":
        return f"Could not generate QR code. {err}"
    return f"Could not generate QR code with the watermark image. {err}"

# ------------------------------------------------------------------------------
# Endpoints
# ------------------------------------------------------------------------------

@app.errorhandler(RequestEntityTooLarge)
def too_large(e):
    logger.warning("Petición demasiado grande: %s", e)
    return error_response(f"Could not upload the watermark image. {e.description}", 413)

@app.route("/generate", methods=["GET", "POST"])
def generate():
    max_size = int((config.get("qr", {}) or {}).get("max_size", 4096))
    try:
        content = parse_content(request.values.get("content"))
        size = parse_size(request.values.get("size"), max_size)
    except ValidationError as e:
        logger.warning("Petición rechazada: %s", e)
        return error_response(str(e))

    upload = extract_upload(request.files, WATERMARK_FIELD)
    if upload.state is UploadState.MALFORMED:
        logger.warning("Marca de agua inválida: %s", upload.reason)
        return error_response(f"Could not upload the watermark image. {upload.reason}")

    watermark = upload.data if upload.state is UploadState.PRESENT else None
    try:
        code = generate_code(content, size, watermark, config)
    except QRError as e:
        logger.warning("Error en etapa %s: %s", e.stage, e)
        return error_response(pipeline_error_message(e))

    logger.info("QR generado: size=%s watermark=%s bytes=%s", size, watermark is not None, len(code))
    return Response(code, status=200, mimetype=PNG_MIME)

@app.route("/health", methods=["GET"])
def health():
    return jsonify({"status": "ok"}), 200

# ------------------------------------------------------------------------------
# Main
# ------------------------------------------------------------------------------

if __name__ == "__main__":
    host = SERVER.get("host", "0.0.0.0")
    port = int(SERVER.get("port", 8080))
    debug = bool(SERVER.get("debug", False))

    app.run(host=host, port=port, debug=debug, threaded=True)
