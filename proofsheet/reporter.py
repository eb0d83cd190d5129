"""
Reporter - Generates human-readable reports from manifest data.
"""

import logging
import os
import sys
from typing import List, Optional, TextIO

from .asset_kind import AssetKind, classify, format_label
from .asset_record import format_bytes
from .manifest import Manifest
from .scanner import CandidatePath, Scanner

TABLE_HEADER = ('Filename', 'Type', 'Resolution', 'Format', 'Size', 'Color Space')


class Reporter:
    """
    Generates human-readable reports from manifest data.
    """

    def __init__(
        self,
        output: Optional[TextIO] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize reporter.

        Args:
            output: Output stream (default: stdout)
            logger: Optional logger instance
        """
        self.output = output or sys.stdout
        self.logger = logger or logging.getLogger(__name__)

    def _print(self, text: str = "") -> None:
        """Print to output stream."""
        print(text, file=self.output)

    def _format_duration(self, seconds: float) -> str:
        """Format duration as human-readable string."""
        if seconds < 60:
            return f"{seconds:.1f} seconds"
        elif seconds < 3600:
            return f"{seconds / 60:.1f} minutes"
        else:
            return f"{seconds / 3600:.1f} hours"

    def report_summary(self, manifest: Manifest) -> None:
        """Generate a summary report."""
        summary = manifest.summary

        self._print("=" * 70)
        self._print("PROOFSHEET MANIFEST SUMMARY")
        self._print("=" * 70)
        self._print()

        self._print("Manifest Information:")
        self._print(f"  Created:     {manifest.created_at}")
        self._print(f"  Root:        {manifest.root}")
        self._print(f"  Scan Time:   {self._format_duration(manifest.scan_duration_seconds)}")
        self._print()

        if manifest.partial:
            self._print("WARNING: Run was cancelled; manifest is partial.")
            self._print(f"   {summary.total_files:,} of {manifest.expected_total:,} assets processed.")
            self._print()

        self._print("Overall Statistics:")
        self._print(f"  Total Files:     {summary.total_files:,}")
        self._print(f"  Total Size:      {summary.total_size}")
        self._print(f"  Images:          {summary.image_count:,}")
        self._print(f"  Videos:          {summary.video_count:,}")
        self._print(f"  Degraded:        {summary.degraded_count:,}")
        self._print()

        self._print("Assets:")
        self._print("-" * 70)
        self._print(f"{'#':>4}  {'Filename':<28} {'Type':<6} {'Resolution':>11} {'Size':>10} {'Dur':>6}")
        self._print("-" * 70)

        for record in manifest.records:
            self._print(
                f"{record.index:>4}  {record.filename[:28]:<28} {str(record.kind or '-'):<6} "
                f"{record.resolution or '-':>11} {record.human_size:>10} "
                f"{record.duration_label or '':>6}"
            )

        self._print("-" * 70)
        self._print()

    def report_table(self, manifest: Manifest) -> None:
        """
        Write the manifest as a tab-separated table, one row per asset in scan order.

        Missing values are written as '-'.
        """
        self._print('\t'.join(TABLE_HEADER))
        for record in manifest.records:
            row = (
                record.filename,
                str(record.kind or '-'),
                record.resolution or '-',
                record.format or '-',
                record.human_size,
                record.color_space or '-',
            )
            self._print('\t'.join(row))

    def report_degraded(self, manifest: Manifest) -> None:
        """List every degraded asset with its reason."""
        degraded = manifest.degraded_records

        self._print("=" * 70)
        self._print("DEGRADED ASSETS")
        self._print("=" * 70)
        self._print()

        if not degraded:
            self._print("No degraded assets.")
            self._print()
            return

        for record in degraded:
            self._print(f"  {record.filename}")
            self._print(f"      {record.status.reason}")
        self._print()
        self._print(f"Total degraded: {len(degraded):,} of {manifest.total_files:,}")
        self._print()

    def report_candidates(self, candidates: List[CandidatePath]) -> None:
        """Dry-run report: what a run would process, without decoding anything."""
        self._print("=" * 70)
        self._print("DRY RUN - ASSETS THAT WOULD BE PROCESSED")
        self._print("=" * 70)
        self._print()

        total_bytes = 0
        for candidate in candidates:
            try:
                size = os.path.getsize(candidate.path)
            except OSError:
                size = None
            total_bytes += size or 0
            self._print(
                f"{candidate.index:>4}  {candidate.filename:<40} "
                f"{str(classify(candidate.path)):<6} {format_label(candidate.path):<5} "
                f"{format_bytes(size):>10}"
            )

        counts = Scanner.count_by_kind(candidates)
        self._print()
        self._print(f"Would process {len(candidates):,} assets ({format_bytes(total_bytes)})")
        self._print(f"  Images: {counts[AssetKind.IMAGE]:,}")
        self._print(f"  Videos: {counts[AssetKind.VIDEO]:,}")
        self._print()
