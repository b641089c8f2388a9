from __future__ import annotations

import logging
from typing import Mapping

from ..lib import command
from .base import UNKNOWN_VERSION, Commands, PackageManager, heredoc, new_command, parse_version, strip_pin

logger = logging.getLogger(__name__)

SOURCES_DIR = "/etc/apt/sources.list.d"
KEYRING_DIR = "/etc/apt/keyrings"


class AptPackageManager(PackageManager):
    def install(self, *pkgs: str) -> Commands:
        return new_command(
            f"DEBIAN_FRONTEND=noninteractive apt-get install -y --no-install-recommends {' '.join(pkgs)}"
        )

    def update(self) -> Commands:
        return new_command("apt-get update")

    def uninstall(self, *pkgs: str) -> Commands:
        return new_command(f"DEBIAN_FRONTEND=noninteractive apt-get remove -y {' '.join(pkgs)}")

    def mark(self, *pkgs: str) -> Commands:
        return new_command(f"apt-mark hold {' '.join(pkgs)}")

    def cleanup_caches(self) -> Commands:
        return new_command("apt-get clean") + new_command("rm -rf /var/lib/apt/lists/*")

    def get_installed_version(self, pkg: str) -> str:
        pkg = strip_pin(pkg)
        _, ok = command.safe_exec(["apt-cache", "show", pkg])
        if not ok:
            logger.debug("No matching package available in db for: %s", pkg)
            return ""

        stdout, ok = command.safe_exec(["dpkg", "-s", pkg])
        if not ok or "install ok installed" not in stdout:
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
        cmds: Commands = []
        options = []
        if gpg_key:
            keyring = f"{KEYRING_DIR}/{name}.asc"
            cmds += new_command(f"mkdir -p {KEYRING_DIR}")
            cmds += new_command(f"curl -fsSL {gpg_key} -o {keyring}")
            options.append(f"signed-by={keyring}")
        options += [f"{k}={v}" for k, v in extra_args.items()]

        line = "deb "
        if options:
            line += f"[{' '.join(options)}] "
        line += f"{url} {version_codename} {channel or 'main'}"
        return cmds + heredoc(f"{SOURCES_DIR}/{name}.list", line)


APT = AptPackageManager()
