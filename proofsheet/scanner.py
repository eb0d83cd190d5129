"""
Scanner - Discovers supported assets in a delivery directory.
"""

import logging
import os
import unicodedata
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional

from .asset_kind import AssetKind, classify, is_supported
from .config import PipelineConfig
from .errors import ScanError


@dataclass(frozen=True)
class CandidatePath:
    """
    A discovered file and its position in scan order.

    Attributes:
        index: 0-based scan-order index, assigned once at discovery
        path: Absolute path of the file
    """
    index: int
    path: str

    @property
    def filename(self) -> str:
        return os.path.basename(self.path)


def sort_key(path: str) -> tuple:
    """Scan-order key: normalized filename, ties broken by full path."""
    name = unicodedata.normalize('NFC', os.path.basename(path)).casefold()
    return (name, path)


class Scanner:
    """
    Walks the input directory and produces the ordered candidate list.

    The scan is flat (root directory only) unless the config asks for
    recursion. Recursive scans never follow symlinked directories.
    """

    def __init__(
        self,
        config: Optional[PipelineConfig] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize scanner.

        Args:
            config: Pipeline configuration (recursive / include_hidden)
            logger: Optional logger instance
        """
        self.config = config or PipelineConfig()
        self.logger = logger or logging.getLogger(__name__)

    def scan(self, root: str) -> List[CandidatePath]:
        """
        Scan a directory and return candidates in scan order.

        Args:
            root: Directory to scan

        Returns:
            CandidatePath list with dense indices 0..N-1

        Raises:
            ScanError: If root is missing, not a directory, unreadable,
                or contains no supported files
        """
        root = os.path.abspath(root)
        if not os.path.exists(root):
            raise ScanError(f"'{root}' does not exist")
        if not os.path.isdir(root):
            raise ScanError(f"'{root}' is not a directory")

        try:
            paths = [p for p in self._iter_files(root) if is_supported(p)]
        except OSError as e:
            raise ScanError(f"Cannot read '{root}': {e}") from e

        if not paths:
            raise ScanError(f"No supported assets found in '{root}'")

        paths.sort(key=sort_key)
        candidates = [CandidatePath(index=i, path=p) for i, p in enumerate(paths)]

        counts = self.count_by_kind(candidates)
        self.logger.info(
            f"Found {len(candidates)} assets "
            f"({counts[AssetKind.IMAGE]} images, {counts[AssetKind.VIDEO]} videos)"
        )
        return candidates

    @staticmethod
    def count_by_kind(candidates: List[CandidatePath]) -> Dict[AssetKind, int]:
        """Count candidates per asset kind."""
        counts = {kind: 0 for kind in AssetKind}
        for candidate in candidates:
            counts[classify(candidate.path)] += 1
        return counts

    def _is_hidden(self, name: str) -> bool:
        return not self.config.include_hidden and name.startswith('.')

    def _iter_files(self, root: str) -> Iterator[str]:
        """Yield regular files under root, honoring the recursion policy."""
        if not self.config.recursive:
            with os.scandir(root) as entries:
                for entry in entries:
                    if self._is_hidden(entry.name):
                        continue
                    if entry.is_file():
                        yield entry.path
            return

        def on_error(error: OSError) -> None:
            if os.path.abspath(error.filename or '') == root:
                raise error
            self.logger.warning(f"Skipping unreadable directory {error.filename}: {error.strerror}")

        for dirpath, dirnames, filenames in os.walk(root, onerror=on_error, followlinks=False):
            dirnames[:] = [d for d in dirnames if not self._is_hidden(d)]
            for name in filenames:
                if self._is_hidden(name):
                    continue
                path = os.path.join(dirpath, name)
                if os.path.isfile(path):
                    yield path
