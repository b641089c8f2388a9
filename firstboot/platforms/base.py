from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import List, Mapping, Tuple

from ..flags import Flag
from ..lib.os_release import OS_RELEASE_PATH, read_os_release
from ..types import Command

logger = logging.getLogger(__name__)

Commands = List[Command]

UNKNOWN_VERSION = "Unknown Version"


def new_command(cmd: str) -> Commands:
    return [Command(cmd=cmd)]


def heredoc_delimiter(body: str, base: str = "EOF") -> str:
    """A terminator that does not occur as a line of ``body``."""

    lines = set(body.split("\n"))
    delimiter = base
    n = 0
    while delimiter in lines:
        n += 1
        delimiter = f"{base}_{n}"
    return delimiter


def heredoc(path: str, body: str) -> Commands:
    """Write ``body`` to ``path`` in one redirect (quoted, no expansion)."""

    if not body.endswith("\n"):
        body += "\n"
    eof = heredoc_delimiter(body)
    return new_command(f"cat <<'{eof}' >{path}\n{body}{eof}")


def strip_pin(pkg: str) -> str:
    """``"kubelet=1.28.0"`` -> ``"kubelet"``."""

    return pkg.split("=")[0]


def parse_version(stdout: str) -> str:
    """Find a ``Version : x`` line in package-tool output."""

    for line in stdout.splitlines():
        if line.startswith("Version"):
            _, _, value = line.partition(":")
            value = value.strip()
            if value:
                return value
    return ""


class PackageManager(ABC):
    """Command generation for one packaging tool. Holds no state."""

    @abstractmethod
    def install(self, *pkgs: str) -> Commands:
        ...

    @abstractmethod
    def update(self) -> Commands:
        ...

    @abstractmethod
    def uninstall(self, *pkgs: str) -> Commands:
        ...

    @abstractmethod
    def mark(self, *pkgs: str) -> Commands:
        ...

    @abstractmethod
    def cleanup_caches(self) -> Commands:
        ...

    @abstractmethod
    def get_installed_version(self, pkg: str) -> str:
        """Return "" when absent, the version when installed, else UNKNOWN_VERSION."""

    @abstractmethod
    def add_repo(
        self,
        url: str,
        channel: str,
        version_codename: str,
        name: str,
        gpg_key: str,
        extra_args: Mapping[str, str],
    ) -> Commands:
        ...


class Platform(ABC):
    """Detection and capabilities for one OS family."""

    name: str = ""
    # os-release ID values this descriptor claims
    ids: Tuple[str, ...] = ()

    def detect_at_runtime(self, path: str = OS_RELEASE_PATH) -> bool:
        return read_os_release(path).get("ID", "") in self.ids

    @abstractmethod
    def get_tags(self, path: str = OS_RELEASE_PATH) -> Tuple[Flag, ...]:
        ...

    def get_version_code_name(self, path: str = OS_RELEASE_PATH) -> str:
        return read_os_release(path).get("VERSION_CODENAME", "")

    @abstractmethod
    def get_package_manager(self) -> PackageManager:
        ...

    def __repr__(self) -> str:
        return f"<Platform {self.name}>"


def yum_repo(name: str, url: str, gpg_key: str, extra_args: Mapping[str, str]) -> str:
    """Body of a ``/etc/yum.repos.d/<name>.repo`` file."""

    lines = [f"[{name}]", f"name={name}", f"baseurl={url}", "enabled=1"]
    if gpg_key:
        lines += ["gpgcheck=1", "repo_gpgcheck=1", f"gpgkey={gpg_key}"]
    else:
        lines.append("gpgcheck=0")
    for k, v in extra_args.items():
        lines.append(f"{k} = {v}")
    return "\n".join(lines) + "\n"


def yum_pin(pkg: str) -> str:
    """``"kubelet=1.28.0"`` -> ``"kubelet-1.28.0"`` (dnf/tdnf spelling)."""

    name, sep, version = pkg.partition("=")
    return f"{name}-{version}" if sep else pkg
