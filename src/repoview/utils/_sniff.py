"""Content sniffing for binary files."""

from typing import Final

# Bytes read from the start of a blob before deciding
SNIFF_LENGTH: Final = 1024

_IMAGE_SIGNATURES: Final[tuple[tuple[bytes, str], ...]] = (
    (b"\x89PNG\r\n\x1a\n", "image/png"),
    (b"\xff\xd8\xff", "image/jpeg"),
    (b"GIF87a", "image/gif"),
    (b"GIF89a", "image/gif"),
    (b"BM", "image/bmp"),
    (b"\x00\x00\x01\x00", "image/x-icon"),
)


def sniff_image_type(data: bytes) -> str | None:
    """Detect an image MIME type from the leading bytes of a file.

    Args:
        data: Leading bytes of the file (at most SNIFF_LENGTH are looked at).

    Returns:
        The MIME type, or None if data does not start like a known image.

    Examples:
        >>> sniff_image_type(b"\\x89PNG\\r\\n\\x1a\\n...")
        'image/png'
        >>> sniff_image_type(b"plain text") is None
        True
    """
    head = data[:SNIFF_LENGTH]
    for signature, mime_type in _IMAGE_SIGNATURES:
        if head.startswith(signature):
            return mime_type
    # RIFF container: "RIFF" <size:4> "WEBP" "VP"
    if head[:4] == b"RIFF" and head[8:14] == b"WEBPVP":
        return "image/webp"
    return None


def is_image(data: bytes) -> bool:
    """True if data starts like a known image format."""
    return sniff_image_type(data) is not None
