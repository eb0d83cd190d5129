"""
ResultSlots - Index-addressed, write-once result storage.
"""

from typing import List, Optional

from .asset_record import AssetRecord


class ResultSlots:
    """
    One slot per candidate, slot i reserved for scan-order index i.

    Each slot is written by exactly one worker task and only once, so no
    lock is needed. Reads happen after all writers have finished.
    """

    def __init__(self, size: int):
        self._slots: List[Optional[AssetRecord]] = [None] * size

    def __len__(self) -> int:
        return len(self._slots)

    def publish(self, index: int, record: AssetRecord) -> None:
        """
        Store the record for a candidate.

        Raises:
            ValueError: If the slot was already written or the record's
                index does not match the slot
        """
        if record.index != index:
            raise ValueError(f"Record index {record.index} published to slot {index}")
        if self._slots[index] is not None:
            raise ValueError(f"Slot {index} already holds a record")
        self._slots[index] = record

    def get(self, index: int) -> Optional[AssetRecord]:
        return self._slots[index]

    @property
    def filled_count(self) -> int:
        return sum(1 for slot in self._slots if slot is not None)

    @property
    def is_complete(self) -> bool:
        return all(slot is not None for slot in self._slots)

    def records(self) -> List[AssetRecord]:
        """Filled records in scan order (empty slots are skipped)."""
        return [slot for slot in self._slots if slot is not None]
