"""Merge Import — identifier-keyed set union of incoming decisions into a local collection.

Invariants:
    - An incoming decision whose id already exists locally is skipped, never overwritten
    - Every incoming decision is counted exactly once: imported + skipped == len(incoming)
    - A repeated id inside the incoming batch is imported once; later copies are skipped

Design Decisions:
    - No field-level merge: same id means same decision, the local copy wins
"""

from collections.abc import Iterable
from dataclasses import dataclass, field

from decision_log.core.decision import Decision


@dataclass
class MergePlan:
    to_insert: list[Decision] = field(default_factory=list)
    skipped: int = 0

    @property
    def imported(self) -> int:
        return len(self.to_insert)


def plan_merge(existing_ids: Iterable[str], incoming: Iterable[Decision]) -> MergePlan:
    seen = set(existing_ids)
    plan = MergePlan()
    for decision in incoming:
        if decision.id in seen:
            plan.skipped += 1
            continue
        seen.add(decision.id)
        plan.to_insert.append(decision)
    return plan
