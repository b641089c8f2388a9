from __future__ import annotations

from typing import Callable, List, Optional, Tuple

from ..context import SystemContext
from ..types import Command, Config, File, Filesystem, Service

UNIT_DIR = "/etc/systemd/system"

UnitRenderer = Callable[[Service], str]


def render_unit(svc: Service) -> str:
    """Minimal unit; richer rendering is plugged in via ServicesPhase(render=...)."""

    lines = ["[Unit]", f"Description={svc.name}", "", "[Service]", f"ExecStart={svc.exec_start}"]
    for k, v in svc.environment.items():
        lines.append(f'Environment="{k}={v}"')
    lines += ["Restart=on-failure", "", "[Install]", "WantedBy=multi-user.target", ""]
    return "\n".join(lines)


class ServicesPhase:
    phase_id = "60_services"

    def __init__(self, render: Optional[UnitRenderer] = None) -> None:
        self.render = render or render_unit

    def apply(self, cfg: Config, ctx: SystemContext) -> Tuple[List[Command], Filesystem]:
        commands: List[Command] = []
        files: Filesystem = {}
        for name, svc in cfg.services.items():
            if not svc.exec_start:
                raise ValueError(f"services.{name}.exec_start is required")
            files[f"{UNIT_DIR}/{name}.service"] = File(content=self.render(svc), permissions="0644")
            commands.append(Command(f"systemctl enable {name}"))
            commands.append(Command(f"systemctl start {name}"))
        if commands:
            commands.insert(0, Command("systemctl daemon-reload"))
        return commands, files
