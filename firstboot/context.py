from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterable, List, Tuple, TypeVar

from .flags import Flag, matches, merge_flags

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class SystemContext:
    """Resolved per-run state. Tags only grow; each change is a new value."""

    flags: Tuple[Flag, ...] = ()
    vars: Dict[str, Any] = field(default_factory=dict)
    name: str = "firstboot"

    def with_flags(self, *flags: Flag) -> "SystemContext":
        merged = merge_flags(self.flags, flags)
        if merged == self.flags:
            return self
        return replace(self, flags=merged)

    def has(self, flag: Flag) -> bool:
        return flag in self.flags

    def applies(self, required: Iterable[Flag]) -> bool:
        return matches(required, self.flags)

    def select(self, items: Iterable[T]) -> List[T]:
        """Keep items whose required flags are all active, in order."""

        kept: List[T] = []
        for item in items:
            required = getattr(item, "flags", ())
            if self.applies(required):
                kept.append(item)
            else:
                logger.debug("Skipping %s (requires %s)", item, ",".join(f.value for f in required))
        return kept
