from __future__ import annotations

import logging
import re
from typing import List, Tuple

from ..context import SystemContext
from ..platforms.base import Platform, strip_pin
from ..types import Command, Config, Filesystem, PackageRepo

logger = logging.getLogger(__name__)


def _repo_name(repo: PackageRepo, index: int) -> str:
    if repo.name:
        return repo.name
    slug = re.sub(r"[^A-Za-z0-9]+", "-", repo.url.split("://", 1)[-1]).strip("-").lower()
    return slug or f"repo-{index}"


class PackagesPhase:
    """Repositories, then removals, installs, holds and cache cleanup."""

    phase_id = "40_packages"

    def __init__(self, platform: Platform) -> None:
        self.platform = platform

    def apply(self, cfg: Config, ctx: SystemContext) -> Tuple[List[Command], Filesystem]:
        pm = self.platform.get_package_manager()
        commands: List[Command] = []

        repos = ctx.select(cfg.package_repos)
        for i, repo in enumerate(repos):
            codename = repo.version_codename or ctx.vars.get("version_codename", "")
            commands += pm.add_repo(
                repo.url,
                repo.channel,
                codename,
                _repo_name(repo, i),
                repo.gpg_key,
                repo.extra_args,
            )

        packages = ctx.select(cfg.packages)
        uninstall = [p.name for p in packages if p.uninstall]
        install = [p.name for p in packages if not p.uninstall]
        mark = [strip_pin(p.name) for p in packages if p.mark and not p.uninstall]

        if not (repos or packages):
            return commands, {}

        commands += pm.update()
        if uninstall:
            commands += pm.uninstall(*uninstall)
        if install:
            commands += pm.install(*install)
        if mark:
            commands += pm.mark(*mark)
        commands += pm.cleanup_caches()

        logger.info(
            "Packages: install=%d uninstall=%d mark=%d repos=%d",
            len(install),
            len(uninstall),
            len(mark),
            len(repos),
        )
        return commands, {}
