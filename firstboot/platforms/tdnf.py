from __future__ import annotations

import logging
from typing import Mapping

from ..lib import command
from .base import UNKNOWN_VERSION, Commands, PackageManager, heredoc, new_command, parse_version, strip_pin, yum_pin, yum_repo

logger = logging.getLogger(__name__)

REPO_DIR = "/etc/yum.repos.d"


class TdnfPackageManager(PackageManager):
    def install(self, *pkgs: str) -> Commands:
        return new_command(f"tdnf install -y {' '.join(yum_pin(p) for p in pkgs)}")

    def update(self) -> Commands:
        return []

    def uninstall(self, *pkgs: str) -> Commands:
        return new_command(f"tdnf remove -y {' '.join(pkgs)}")

    def mark(self, *pkgs: str) -> Commands:
        return []

    def cleanup_caches(self) -> Commands:
        return []

    def get_installed_version(self, pkg: str) -> str:
        pkg = strip_pin(pkg)
        _, ok = command.safe_exec(["tdnf", "info", pkg])
        if not ok:
            logger.debug("No matching package available in db for: %s", pkg)
            return ""

        stdout, ok = command.safe_exec(["tdnf", "info", "installed", pkg])
        if not ok:
            logger.debug("%s package available in db but not installed", pkg)
            return ""

        version = parse_version(stdout)
        if version:
            return version
        logger.debug("Unable to find version info in %s", stdout)
        return UNKNOWN_VERSION

    def add_repo(
        self,
        url: str,
        channel: str,
        version_codename: str,
        name: str,
        gpg_key: str,
        extra_args: Mapping[str, str],
    ) -> Commands:
        return heredoc(f"{REPO_DIR}/{name}.repo", yum_repo(name, url, gpg_key, extra_args))


TDNF = TdnfPackageManager()
