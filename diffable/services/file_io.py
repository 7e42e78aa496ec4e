"""
File input service.

Handles:
- Binary detection
- Encoding detection
- Image loading
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import chardet
from PIL import Image, UnidentifiedImageError


@dataclass
class TextContent:
    """Decoded text file."""
    text: str
    encoding: str
    size: int


class FileIOService:
    """Service for reading comparison inputs."""

    # Binary file signatures (magic bytes)
    BINARY_SIGNATURES = [
        b'\x00',           # Null byte (strong indicator)
        b'\x89PNG',        # PNG
        b'\xff\xd8\xff',   # JPEG
        b'GIF8',           # GIF
        b'PK\x03\x04',     # ZIP
        b'\x1f\x8b',       # GZIP
        b'%PDF',           # PDF
        b'\x7fELF',        # ELF
        b'MZ',             # Windows executable
    ]

    IMAGE_SUFFIXES = {
        '.png', '.jpg', '.jpeg', '.gif', '.bmp', '.tif', '.tiff', '.webp', '.ico',
    }

    def __init__(
        self,
        default_encoding: str = 'utf-8',
        fallback_encoding: str = 'latin-1',
        binary_check_size: int = 8192
    ):
        self.default_encoding = default_encoding
        self.fallback_encoding = fallback_encoding
        self.binary_check_size = binary_check_size

    def read_bytes(self, path: Path | str) -> bytes:
        """Read a file as raw bytes."""
        return Path(path).read_bytes()

    def read_text(self, path: Path | str) -> TextContent:
        """
        Read a text file with automatic encoding detection.

        Undecodable content is decoded with the fallback encoding, which
        accepts any byte.
        """
        content = self.read_bytes(path)
        encoding = self._detect_encoding(content)
        try:
            text = content.decode(encoding)
        except (UnicodeDecodeError, LookupError) as e:
            logging.warning(
                f"FileIOService - Could not decode {path} as {encoding}, "
                f"using {self.fallback_encoding}: {e}"
            )
            encoding = self.fallback_encoding
            text = content.decode(encoding)
        return TextContent(text=text, encoding=encoding, size=len(content))

    def load_image(self, path: Path | str) -> Image.Image:
        """Open an image and load its pixels."""
        with Image.open(path) as img:
            img.load()
            return img.copy()

    def is_image_file(self, path: Path | str) -> bool:
        """Check if Pillow can identify a file as an image."""
        path = Path(path)
        if path.suffix.lower() not in self.IMAGE_SUFFIXES:
            return False
        try:
            with Image.open(path):
                return True
        except (UnidentifiedImageError, OSError):
            return False

    def is_binary_file(self, path: Path | str) -> bool:
        """Check if a file is binary."""
        with open(path, 'rb') as f:
            chunk = f.read(self.binary_check_size)

        for sig in self.BINARY_SIGNATURES:
            if chunk.startswith(sig):
                return True

        if b'\x00' in chunk:
            return True

        # Ratio of control bytes other than tab/newline/CR/form feed
        non_text = sum(1 for b in chunk if b < 9 or (13 < b < 32))
        return len(chunk) > 0 and non_text / len(chunk) > 0.3

    def _detect_encoding(self, content: bytes) -> str:
        """Detect encoding of content."""
        if not content:
            return self.default_encoding

        result = chardet.detect(content)

        if result['confidence'] > 0.7 and result['encoding']:
            encoding = result['encoding'].lower()
            if encoding == 'ascii':
                return 'utf-8'  # ASCII is subset of UTF-8
            return encoding

        return self.default_encoding
