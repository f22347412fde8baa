# processors/__init__.py
import io

from PIL import Image

PNG_MIME = "image/png"

def ensure_rgba(img: Image.Image) -> Image.Image:
    """
    Asegura que la imagen esté en modo RGBA.
    """
    return img if img.mode == "RGBA" else img.convert("RGBA")

def to_png_bytes(img: Image.Image) -> bytes:
    """
    Serializa una imagen a PNG (sin pérdida, conserva alpha).
    """
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()
