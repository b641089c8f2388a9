from __future__ import annotations

import logging
from typing import Tuple

from ..errors import UnsupportedPlatformError
from ..lib.os_release import OS_RELEASE_PATH, read_os_release
from .base import UNKNOWN_VERSION, Commands, PackageManager, Platform
from .debian import Debian, Ubuntu
from .photon import Photon
from .redhat import CentOS, Fedora, RedHat

logger = logging.getLogger(__name__)

# Detection order: the first descriptor that matches wins.
PLATFORMS: Tuple[Platform, ...] = (
    Ubuntu(),
    Debian(),
    Fedora(),
    CentOS(),
    RedHat(),
    Photon(),
)


def detect_platform(path: str = OS_RELEASE_PATH) -> Platform:
    for platform in PLATFORMS:
        if platform.detect_at_runtime(path):
            logger.info("Detected platform %s (%s)", platform.name, path)
            return platform
    os_id = read_os_release(path).get("ID") or "unknown"
    raise UnsupportedPlatformError(f"Unsupported platform: ID={os_id} ({path})")


__all__ = [
    "PLATFORMS",
    "UNKNOWN_VERSION",
    "Commands",
    "PackageManager",
    "Platform",
    "detect_platform",
]
