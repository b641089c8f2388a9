from __future__ import annotations

from typing import Tuple

from ..flags import Flag
from ..lib.os_release import OS_RELEASE_PATH, major_version, read_os_release
from .base import PackageManager, Platform
from .tdnf import TDNF

_VERSION_FLAGS = {
    2: Flag.PHOTON2,
    3: Flag.PHOTON3,
}


class Photon(Platform):
    name = "photon"
    ids = ("photon",)

    def get_tags(self, path: str = OS_RELEASE_PATH) -> Tuple[Flag, ...]:
        major = major_version(read_os_release(path).get("VERSION_ID", ""))
        version_flag = _VERSION_FLAGS.get(major) if major is not None else None
        if version_flag is None:
            return (Flag.PHOTON,)
        return (version_flag, Flag.PHOTON)

    def get_package_manager(self) -> PackageManager:
        return TDNF
