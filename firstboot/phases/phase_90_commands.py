from __future__ import annotations

from typing import List, Tuple

from ..context import SystemContext
from ..types import Command, Config, Filesystem


class CommandsPhase:
    phase_id = "90_commands"

    def apply(self, cfg: Config, ctx: SystemContext) -> Tuple[List[Command], Filesystem]:
        return ctx.select(cfg.commands) + ctx.select(cfg.post_commands), {}
