"""
QR Code Generation CLI

Runs the same pipeline as the HTTP server (processors/pipeline.py):
- Encode the content as a QR code (error correction Medium)
- Optionally center a PNG watermark on it (a quarter of the code width)

Usage:
  python generate_qr.py --content "https://example.com" --size 512
  python generate_qr.py --content "hola" --size 512 --watermark logo.png
  python generate_qr.py --content "hola" --size 512 --watermark-url https://example.com/logo.png
"""
import os
import sys
import logging
import argparse
from typing import Any, Dict, Optional

import requests

from config_loader import load_config
from processors.errors import QRError
from processors.pipeline import generate

logger = logging.getLogger("generate_qr")

# ------------------------------------------------------------------------------
# Helpers
# ------------------------------------------------------------------------------

def _read_file(path: str) -> bytes:
    with open(path, "rb") as f:
        return f.read()

def _download(url: str, timeout: int = 15) -> bytes:
    logger.info("Descargando marca de agua: %s", url)
    r = requests.get(url, timeout=timeout)
    r.raise_for_status()
    return r.content

def load_watermark(path: Optional[str], url: Optional[str]) -> Optional[bytes]:
    if path:
        return _read_file(path)
    if url:
        return _download(url)
    return None

# ------------------------------------------------------------------------------
# API pública
# ------------------------------------------------------------------------------

def generate_to_file(content: str, size: int, output: str,
                     watermark: Optional[bytes] = None,
                     config: Optional[Dict[str, Any]] = None) -> str:
    data = generate(content, size, watermark, config)
    out_dir = os.path.dirname(output)
    if out_dir:
        os.makedirs(out_dir, exist_ok=True)
    with open(output, "wb") as f:
        f.write(data)
    return output

# ------------------------------------------------------------------------------
# CLI
# ------------------------------------------------------------------------------
def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Genera un código QR en PNG, opcionalmente con una marca de agua centrada."
    )
    parser.add_argument("--content", help="Texto a codificar", required=True)
    parser.add_argument("--size", help="Tamaño en píxeles (ancho = alto)", type=int, required=True)
    wm = parser.add_mutually_exclusive_group()
    wm.add_argument("--watermark", help="Ruta a un PNG local para superponer")
    wm.add_argument("--watermark-url", help="URL de un PNG para superponer")
    parser.add_argument("--output", help="Archivo de salida", default="qrcode.png")
    parser.add_argument("--settings", help="Ruta a settings.json", default="settings.json")
    parser.add_argument("--log", help="Nivel de log (DEBUG, INFO, WARNING, ERROR)", default="INFO")
    args = parser.parse_args(argv)

    logging.basicConfig(level=getattr(logging, args.log.upper(), logging.INFO),
                        format="%(asctime)s %(levelname)s %(message)s")

    if args.size <= 0:
        parser.error("--size debe ser un entero positivo")

    cfg = load_config(settings_path=args.settings)

    try:
        watermark = load_watermark(args.watermark, args.watermark_url)
    except (OSError, requests.RequestException) as e:
        logger.error("No se pudo obtener la marca de agua: %s", e)
        return 1

    try:
        out_path = generate_to_file(args.content, args.size, args.output, watermark, cfg)
    except QRError as e:
        logger.error("Error en etapa %s: %s", e.stage, e)
        return 1

    print(f"Generado: {out_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
