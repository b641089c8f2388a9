from __future__ import annotations

import shlex
from typing import List, Tuple

from ..context import SystemContext
from ..types import Command, Config, File, Filesystem

ENVIRONMENT_FILE = "/etc/environment"


class EnvironmentPhase:
    phase_id = "35_environment"

    def apply(self, cfg: Config, ctx: SystemContext) -> Tuple[List[Command], Filesystem]:
        commands: List[Command] = []
        files: Filesystem = {}
        if cfg.environment:
            content = "".join(f"{k}={shlex.quote(v)}\n" for k, v in cfg.environment.items())
            files[ENVIRONMENT_FILE] = File(content=content, permissions="0644")
        if cfg.timezone:
            commands.append(Command(f"timedatectl set-timezone {shlex.quote(cfg.timezone)}"))
        return commands, files
