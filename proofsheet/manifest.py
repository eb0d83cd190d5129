"""
Manifest - Ordered asset records and summary for a delivery directory.
"""

import json
import logging
import os
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Iterator, List, Optional, Tuple

from .asset_kind import AssetKind
from .asset_record import AssetRecord
from .manifest_summary import ManifestSummary

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Manifest:
    """
    Final result of a run, in scan order.

    Attributes:
        created_at: ISO timestamp when the manifest was created
        root: Scanned directory
        records: Asset records ordered by scan-order index
        summary: Totals over the records
        expected_total: Number of candidates discovered
        partial: True if the run was cancelled before every asset finished
        scan_duration_seconds: How long the run took
    """
    created_at: str
    root: str
    records: Tuple[AssetRecord, ...] = ()
    summary: ManifestSummary = field(default_factory=ManifestSummary)
    expected_total: int = 0
    partial: bool = False
    scan_duration_seconds: float = 0.0

    @property
    def total_files(self) -> int:
        return self.summary.total_files

    @property
    def degraded_records(self) -> List[AssetRecord]:
        return [r for r in self.records if r.is_degraded]

    def get_records_of_kind(self, kind: AssetKind) -> Iterator[AssetRecord]:
        """Yield records of a specific kind."""
        for record in self.records:
            if record.kind is kind:
                yield record

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization and rendering."""
        return {
            'created_at': self.created_at,
            'root': self.root,
            'partial': self.partial,
            'expected_total': self.expected_total,
            'scan_duration_seconds': self.scan_duration_seconds,
            'summary': self.summary.to_dict(),
            'assets': [r.to_dict() for r in self.records],
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'Manifest':
        """Create from dictionary."""
        records = tuple(AssetRecord.from_dict(item) for item in data.get('assets', []))
        return cls(
            created_at=data['created_at'],
            root=data['root'],
            records=records,
            summary=ManifestSummary.from_dict(data.get('summary', {})),
            expected_total=data.get('expected_total', len(records)),
            partial=data.get('partial', False),
            scan_duration_seconds=data.get('scan_duration_seconds', 0.0),
        )

    def save(self, filepath: str) -> None:
        """Save manifest to a JSON file, replacing any previous one atomically."""
        path = Path(filepath)
        path.parent.mkdir(parents=True, exist_ok=True)

        tmp_path = path.with_name(f".{path.name}.tmp")
        with open(tmp_path, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)
        os.replace(tmp_path, path)

        size_kb = path.stat().st_size / 1024
        logger.info(f"Manifest saved: {filepath} ({size_kb:.1f} KB, {len(self.records)} assets)")

    @classmethod
    def load(cls, filepath: str) -> 'Manifest':
        """Load manifest from a JSON file."""
        with open(filepath, 'r') as f:
            data = json.load(f)
        return cls.from_dict(data)

    @classmethod
    def create_new(
        cls,
        root: str,
        records: Optional[List[AssetRecord]] = None,
        summary: Optional[ManifestSummary] = None,
        expected_total: Optional[int] = None,
        partial: bool = False,
        scan_duration_seconds: float = 0.0
    ) -> 'Manifest':
        """Create a manifest stamped with the current time."""
        records = tuple(records or ())
        return cls(
            created_at=datetime.now().isoformat(),
            root=root,
            records=records,
            summary=summary or ManifestSummary(),
            expected_total=len(records) if expected_total is None else expected_total,
            partial=partial,
            scan_duration_seconds=scan_duration_seconds,
        )
