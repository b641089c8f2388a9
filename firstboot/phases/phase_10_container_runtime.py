from __future__ import annotations

import logging
from typing import List, Tuple

from ..context import SystemContext
from ..flags import Flag
from ..types import Command, Config, File, Filesystem, Package

logger = logging.getLogger(__name__)


RUNTIME_FLAGS = {
    "docker": Flag.DOCKER,
    "containerd": Flag.CONTAINERD,
}

# Package names differ per family; PackagesPhase keeps only the matching one.
RUNTIME_PACKAGES = {
    "docker": [
        ("docker.io", Flag.DEBIAN_LIKE),
        ("moby-engine", Flag.FEDORA),
        ("docker", Flag.REDHAT),
        ("docker", Flag.PHOTON),
    ],
    "containerd": [
        ("containerd", Flag.DEBIAN_LIKE),
        ("containerd", Flag.REDHAT_LIKE),
        ("containerd", Flag.PHOTON),
    ],
}

PULL_COMMANDS = {
    "docker": "docker pull {image}",
    "containerd": "ctr image pull {image}",
}


class ContainerRuntimePhase:
    phase_id = "10_container_runtime"

    def process_flags(self, cfg: Config, ctx: SystemContext) -> SystemContext:
        rt = cfg.container_runtime
        if rt is None:
            return ctx
        flag = RUNTIME_FLAGS.get(rt.type)
        if flag is None:
            # surfaced by apply()
            return ctx
        return ctx.with_flags(flag)

    def apply(self, cfg: Config, ctx: SystemContext) -> Tuple[List[Command], Filesystem]:
        rt = cfg.container_runtime
        if rt is None:
            return [], {}
        if rt.type not in RUNTIME_FLAGS:
            raise ValueError(f"Unsupported container_runtime.type={rt.type!r} (expected docker or containerd)")

        for name, family in RUNTIME_PACKAGES[rt.type]:
            if rt.version:
                name = f"{name}={rt.version}"
            cfg.packages.append(Package(name=name, flags=(family,)))

        files: Filesystem = {}
        if rt.options and rt.type == "docker":
            files["/etc/docker/daemon.json"] = File(content=rt.options, permissions="0644")

        cfg.commands.append(Command(f"systemctl enable {rt.type}"))
        cfg.commands.append(Command(f"systemctl start {rt.type}"))
        for image in cfg.images:
            cfg.commands.append(Command(PULL_COMMANDS[rt.type].format(image=image)))

        logger.info("Container runtime %s (images=%d)", rt.type, len(cfg.images))
        return [], files
