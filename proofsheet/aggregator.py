"""
Aggregator - Folds ordered asset records into the final manifest.
"""

from typing import List, Optional

from .asset_kind import AssetKind
from .asset_record import AssetRecord
from .manifest import Manifest
from .manifest_summary import ManifestSummary
from .result_slots import ResultSlots


class Aggregator:
    """Builds summaries and manifests. Pure: no I/O, no failure modes."""

    @staticmethod
    def summarize(records: List[AssetRecord]) -> ManifestSummary:
        """Compute summary counts for a list of records."""
        return ManifestSummary(
            total_files=len(records),
            total_bytes=sum(r.file_size for r in records),
            image_count=sum(1 for r in records if r.kind is AssetKind.IMAGE),
            video_count=sum(1 for r in records if r.kind is AssetKind.VIDEO),
            degraded_count=sum(1 for r in records if r.is_degraded),
        )

    def aggregate(
        self,
        slots: ResultSlots,
        root: str,
        scan_duration_seconds: float = 0.0,
        partial: Optional[bool] = None
    ) -> Manifest:
        """
        Produce the manifest from the slot array.

        Args:
            slots: Slot array, read start to end
            root: Scanned directory
            scan_duration_seconds: Wall time of the run
            partial: Override for the partial flag (default: any empty slot)

        Returns:
            Manifest with records in scan order
        """
        records = slots.records()
        return Manifest.create_new(
            root=root,
            records=records,
            summary=self.summarize(records),
            expected_total=len(slots),
            partial=not slots.is_complete if partial is None else partial,
            scan_duration_seconds=scan_duration_seconds,
        )
