# processors/sniff.py
"""
Content type detection based on magic bytes.

Only the first 512 bytes are examined, so the check works on raw uploads
that may not decode at all.
"""

SNIFF_LEN = 512

# (firma, tipo MIME) en orden de prioridad
SIGNATURES = [
    (b'\x89PNG\r\n\x1a\n', "image/png"),
    (b'\xff\xd8\xff', "image/jpeg"),
    (b'GIF87a', "image/gif"),
    (b'GIF89a', "image/gif"),
    (b'BM', "image/bmp"),
    (b'\x00\x00\x01\x00', "image/x-icon"),
    (b'\x00\x00\x02\x00', "image/x-icon"),
    (b'%PDF-', "application/pdf"),
    (b'PK\x03\x04', "application/zip"),
    (b'\x1f\x8b\x08', "application/x-gzip"),
]

TEXT_PLAIN = "text/plain; charset=utf-8"
OCTET_STREAM = "application/octet-stream"

# bytes de control que nunca aparecen en texto plano
_BINARY_BYTES = frozenset(
    list(range(0x00, 0x09)) + [0x0b] + list(range(0x0e, 0x1b)) + list(range(0x1c, 0x20))
)


def _is_webp(head: bytes) -> bool:
    return head.startswith(b'RIFF') and head[8:14] == b'WEBPVP'


def sniff_content_type(data: bytes) -> str:
    """
    Devuelve el tipo MIME más probable de `data` a partir de su firma.
    """
    head = data[:SNIFF_LEN]

    for signature, mime in SIGNATURES:
        if head.startswith(signature):
            return mime

    if _is_webp(head):
        return "image/webp"

    if any(b in _BINARY_BYTES for b in head):
        return OCTET_STREAM
    return TEXT_PLAIN
