# processors/resample.py
import math
import logging

from PIL import Image

from . import ensure_rgba
from .errors import DecodeError, ResampleError

logger = logging.getLogger("resample")

LANCZOS_LOBES = 3


def target_size(source_size, target_width: int):
    """
    Calcula (ancho, alto) conservando la relación de aspecto del origen.
    El alto se redondea al entero más cercano (x.5 hacia arriba) y nunca
    baja de 1 px.
    """
    sw, sh = source_size
    if target_width <= 0:
        raise ResampleError(f"target width must be positive, got {target_width}")
    if sw == 0:
        raise DecodeError("source", "image has zero width")
    target_h = max(1, int(target_width * sh / sw + 0.5))
    return target_width, target_h


def edge_padding(source_size, size) -> int:
    """
    Píxeles de margen necesarios para que el núcleo Lanczos nunca lea fuera
    del origen en ninguno de los dos ejes.
    """
    scale = max(source_size[0] / size[0], source_size[1] / size[1], 1.0)
    return int(math.ceil(LANCZOS_LOBES * scale)) + 1


def pad_edges(img: Image.Image, pad: int) -> Image.Image:
    """
    Añade `pad` píxeles por lado repitiendo la fila/columna del borde.
    """
    w, h = img.size
    out = Image.new(img.mode, (w + 2 * pad, h + 2 * pad))
    out.paste(img, (pad, pad))

    top = img.crop((0, 0, w, 1)).resize((w, pad), Image.NEAREST)
    bottom = img.crop((0, h - 1, w, h)).resize((w, pad), Image.NEAREST)
    out.paste(top, (pad, 0))
    out.paste(bottom, (pad, pad + h))

    # columnas sobre el lienzo ya extendido: cubren también las esquinas
    full_h = out.height
    left = out.crop((pad, 0, pad + 1, full_h)).resize((pad, full_h), Image.NEAREST)
    right = out.crop((pad + w - 1, 0, pad + w, full_h)).resize((pad, full_h), Image.NEAREST)
    out.paste(left, (0, 0))
    out.paste(right, (pad + w, 0))
    return out


def resize(source: Image.Image, target_width: int) -> Image.Image:
    """
    Redimensiona `source` al ancho indicado con un filtro Lanczos de 3 lóbulos.

    El alto se deriva del aspecto original. Las coordenadas de muestreo que
    caen fuera del origen se fijan al borde (el borde se replica), sin
    transparencia añadida. Pillow filtra RGBA sobre alpha premultiplicado, de
    modo que un píxel transparente no tiñe a sus vecinos.

    Devuelve siempre una imagen nueva en modo RGBA; si el tamaño no cambia,
    la copia es idéntica píxel a píxel.
    """
    size = target_size(source.size, target_width)
    img = ensure_rgba(source)
    if img.size == size:
        return img.copy()

    w, h = img.size
    pad = edge_padding(img.size, size)
    logger.debug("Resizing %sx%s -> %sx%s (pad=%s)", w, h, size[0], size[1], pad)
    padded = pad_edges(img, pad)
    return padded.resize(size, Image.LANCZOS, box=(pad, pad, pad + w, pad + h))
