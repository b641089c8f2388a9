from __future__ import annotations

from typing import List, Tuple

from ..context import SystemContext
from ..types import Command, Config, File, Filesystem

SYSCTL_FILE = "/etc/sysctl.d/100-firstboot.conf"


class SysctlPhase:
    phase_id = "30_sysctl"

    def apply(self, cfg: Config, ctx: SystemContext) -> Tuple[List[Command], Filesystem]:
        if not cfg.sysctls:
            return [], {}
        commands = [Command(f"sysctl -w {k}={v}") for k, v in cfg.sysctls.items()]
        content = "".join(f"{k}={v}\n" for k, v in cfg.sysctls.items())
        return commands, {SYSCTL_FILE: File(content=content, permissions="0644")}
