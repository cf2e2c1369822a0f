"""
Skip-with-reason collector for schema extraction and emission.

Extraction never aborts because one relation, custom field or value object
cannot be analyzed. Every such skip is recorded here so callers and tests can
see what was left out and why.
"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List, Optional


logger = logging.getLogger(__name__)


class Stage:
    """Pipeline stages that can record a skip."""

    DISCOVERY = "discovery"
    RELATIONSHIP = "relationship"
    CAST = "cast"
    VALUE_OBJECT = "value_object"
    EMISSION = "emission"


@dataclass(frozen=True)
class SkippedItem:
    """One skipped relation, field or value object."""

    stage: str
    subject: str
    reason: str

    def __str__(self) -> str:
        return f"[{self.stage}] {self.subject}: {self.reason}"


@dataclass
class Diagnostics:
    """Collects skipped items across a generation run."""

    items: List[SkippedItem] = field(default_factory=list)

    def skip(self, stage: str, subject: str, reason: str, level: int = logging.DEBUG) -> SkippedItem:
        """Record a skipped item and log it."""
        item = SkippedItem(stage=stage, subject=subject, reason=reason)
        self.items.append(item)
        logger.log(level, "Skipping %s", item)
        return item

    def by_stage(self, stage: Optional[str] = None) -> List[SkippedItem]:
        if stage is None:
            return list(self.items)
        return [item for item in self.items if item.stage == stage]

    def subjects(self, stage: Optional[str] = None) -> List[str]:
        return [item.subject for item in self.by_stage(stage)]

    def counts(self) -> Dict[str, int]:
        return dict(Counter(item.stage for item in self.items))

    def summary(self) -> str:
        """One-line summary such as ``2 skipped (cast: 1, relationship: 1)``."""
        if not self.items:
            return "0 skipped"
        parts = ", ".join(f"{stage}: {count}" for stage, count in sorted(self.counts().items()))
        return f"{len(self.items)} skipped ({parts})"

