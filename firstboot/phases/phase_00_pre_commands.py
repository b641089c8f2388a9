from __future__ import annotations

from typing import List, Tuple

from ..context import SystemContext
from ..types import Command, Config, Filesystem


class PreCommandsPhase:
    phase_id = "00_pre_commands"

    def apply(self, cfg: Config, ctx: SystemContext) -> Tuple[List[Command], Filesystem]:
        return ctx.select(cfg.pre_commands), {}
