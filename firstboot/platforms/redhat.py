from __future__ import annotations

from typing import Tuple

from ..flags import Flag
from ..lib.os_release import OS_RELEASE_PATH
from .base import PackageManager, Platform
from .dnf import DNF


class RedHat(Platform):
    name = "redhat"
    ids = ("rhel", "rocky", "almalinux")

    def get_tags(self, path: str = OS_RELEASE_PATH) -> Tuple[Flag, ...]:
        return (Flag.REDHAT, Flag.REDHAT_LIKE)

    def get_package_manager(self) -> PackageManager:
        return DNF


class CentOS(RedHat):
    name = "centos"
    ids = ("centos",)

    def get_tags(self, path: str = OS_RELEASE_PATH) -> Tuple[Flag, ...]:
        return (Flag.CENTOS, Flag.REDHAT, Flag.REDHAT_LIKE)


class Fedora(RedHat):
    name = "fedora"
    ids = ("fedora",)

    def get_tags(self, path: str = OS_RELEASE_PATH) -> Tuple[Flag, ...]:
        return (Flag.FEDORA, Flag.REDHAT_LIKE)
