"""
AssetKind - Asset kinds and the supported-format table.
"""

import os
from enum import Enum
from typing import Dict

from .errors import ClassificationError


class AssetKind(str, Enum):
    """Kind of a delivered asset, decided once from its extension."""

    IMAGE = 'Image'
    VIDEO = 'Video'

    def __str__(self) -> str:
        return self.value


IMAGE_EXTENSIONS = ('.jpg', '.jpeg', '.png', '.tif', '.tiff', '.webp')
VIDEO_EXTENSIONS = ('.mp4', '.mov', '.mxf')

# Extension (lowercase, with dot) -> kind
SUPPORTED_FORMATS: Dict[str, AssetKind] = {}
for ext in IMAGE_EXTENSIONS:
    SUPPORTED_FORMATS[ext] = AssetKind.IMAGE
for ext in VIDEO_EXTENSIONS:
    SUPPORTED_FORMATS[ext] = AssetKind.VIDEO


def is_supported(path: str) -> bool:
    """True if the path's extension is in the supported-format table."""
    return os.path.splitext(path)[1].lower() in SUPPORTED_FORMATS


def classify(path: str) -> AssetKind:
    """
    Map a file path to its asset kind.

    Args:
        path: File path; only the extension is inspected (case-insensitive)

    Returns:
        AssetKind for the extension

    Raises:
        ClassificationError: If the extension is not supported
    """
    ext = os.path.splitext(path)[1].lower()
    try:
        return SUPPORTED_FORMATS[ext]
    except KeyError:
        raise ClassificationError(
            f"Unsupported extension {ext or '<none>'!r} for {os.path.basename(path)}"
        ) from None


def format_label(path: str) -> str:
    """Format label shown in the manifest, e.g. 'JPG' or 'MOV'."""
    return os.path.splitext(path)[1].lstrip('.').upper()
