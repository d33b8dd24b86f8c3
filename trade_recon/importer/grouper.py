"""
Trade grouping

Clusters execution legs into logical trades by Position ID, falling back
to Trade ID. Legs carrying neither key each form their own trade.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List

from .models import RawExecutionRecord


@dataclass
class RecordGroups:
    """Keyed buckets in first-seen key order, plus legs without a key"""
    grouped: Dict[str, List[RawExecutionRecord]] = field(default_factory=dict)
    ungrouped: List[RawExecutionRecord] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.grouped) + len(self.ungrouped)


def group_records(records: Iterable[RawExecutionRecord]) -> RecordGroups:
    """Partition records by group key, keeping file order within each bucket"""
    groups = RecordGroups()
    for record in records:
        key = record.group_key
        if key:
            groups.grouped.setdefault(key, []).append(record)
        else:
            groups.ungrouped.append(record)
    return groups
