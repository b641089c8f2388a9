from __future__ import annotations

import re
from enum import Enum
from typing import Iterable, Optional, Tuple

from .errors import UnknownFlagError


class Flag(str, Enum):
    """Capability tags. The value is the spelling used in annotations."""

    # OS families
    DEBIAN = "debian"
    UBUNTU = "ubuntu"
    DEBIAN_LIKE = "debianlike"
    REDHAT = "redhat"
    CENTOS = "centos"
    FEDORA = "fedora"
    REDHAT_LIKE = "redhatlike"
    PHOTON = "photon"

    # OS versions
    PHOTON2 = "photon2"
    PHOTON3 = "photon3"

    # Features
    DOCKER = "docker"
    CONTAINERD = "containerd"
    KUBERNETES = "kubernetes"

    def __str__(self) -> str:
        return self.value


FLAG_MAP = {f.value: f for f in Flag}

# trailing " # tag tag" comment; quotes are not allowed inside it
_ANNOTATION_RE = re.compile(r"^(?P<value>.*?)\s+#(?P<flags>[^#'\"]*)$")


def resolve(spelling: str) -> Optional[Flag]:
    return FLAG_MAP.get(spelling)


def parse_flags(spellings: Iterable[str]) -> Tuple[Flag, ...]:
    """Resolve every spelling or raise on the first unknown one."""

    out: list[Flag] = []
    for s in spellings:
        s = str(s).strip()
        if not s:
            continue
        flag = resolve(s)
        if flag is None:
            raise UnknownFlagError(s)
        if flag not in out:
            out.append(flag)
    return tuple(out)


def parse_annotation(text: str) -> Tuple[str, Tuple[Flag, ...]]:
    """Split ``"value # tag tag"`` into the value and its required flags."""

    m = _ANNOTATION_RE.match(text.strip())
    if not m:
        return text.strip(), ()
    return m.group("value").strip(), parse_flags(m.group("flags").split())


def matches(required: Iterable[Flag], active: Iterable[Flag]) -> bool:
    """An item applies when all of its required flags are active."""

    return set(required) <= set(active)


def merge_flags(*groups: Iterable[Flag]) -> Tuple[Flag, ...]:
    out: list[Flag] = []
    for group in groups:
        for f in group:
            if f not in out:
                out.append(f)
    return tuple(out)
