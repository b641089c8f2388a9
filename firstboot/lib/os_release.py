from __future__ import annotations

import logging
import shlex
from pathlib import Path
from typing import Dict

logger = logging.getLogger(__name__)

OS_RELEASE_PATH = "/etc/os-release"


def read_os_release(path: str = OS_RELEASE_PATH) -> Dict[str, str]:
    """Parse an os-release style KEY=value document.

    A missing or unreadable file yields an empty mapping.
    """

    try:
        text = Path(path).read_text(encoding="utf-8", errors="ignore")
    except OSError:
        logger.debug("os-release not readable: %s", path)
        return {}

    data: Dict[str, str] = {}
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, raw = line.split("=", 1)
        try:
            parts = shlex.split(raw)
        except ValueError:
            parts = [raw.strip("\"'")]
        data[key.strip()] = " ".join(parts)
    return data


def major_version(version_id: str) -> int | None:
    """``"3.0"`` -> 3; anything unparseable -> None."""

    head = (version_id or "").split(".")[0].strip()
    try:
        return int(head)
    except ValueError:
        return None
