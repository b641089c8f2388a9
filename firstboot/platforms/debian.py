from __future__ import annotations

from typing import Tuple

from ..flags import Flag
from ..lib.os_release import OS_RELEASE_PATH
from .apt import APT
from .base import PackageManager, Platform


class Debian(Platform):
    name = "debian"
    ids = ("debian",)

    def get_tags(self, path: str = OS_RELEASE_PATH) -> Tuple[Flag, ...]:
        return (Flag.DEBIAN, Flag.DEBIAN_LIKE)

    def get_package_manager(self) -> PackageManager:
        return APT


class Ubuntu(Debian):
    name = "ubuntu"
    ids = ("ubuntu",)

    def get_tags(self, path: str = OS_RELEASE_PATH) -> Tuple[Flag, ...]:
        return (Flag.UBUNTU, Flag.DEBIAN_LIKE)
