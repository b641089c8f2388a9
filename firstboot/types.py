from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .errors import ConfigError
from .flags import Flag, parse_annotation, parse_flags

logger = logging.getLogger(__name__)


def _tags_of(raw: Mapping[str, Any]) -> Tuple[Flag, ...]:
    tags = raw.get("tags") or raw.get("flags") or []
    if isinstance(tags, str):
        tags = tags.split()
    if not isinstance(tags, list):
        raise ConfigError(f"tags must be a list of flag names, got {type(tags).__name__}")
    return parse_flags(tags)


def _str_map(raw: Any, what: str) -> Dict[str, str]:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigError(f"{what} must be a mapping")
    return {str(k): "" if v is None else str(v) for k, v in raw.items()}


@dataclass(frozen=True)
class Command:
    cmd: str
    flags: Tuple[Flag, ...] = ()

    def __str__(self) -> str:
        return self.cmd

    @classmethod
    def parse(cls, raw: Any) -> "Command":
        """Accept ``"cmd # tag"`` or ``{"cmd": ..., "tags": [...]}``."""

        if raw is None:
            raise ConfigError("empty command entry")
        if isinstance(raw, dict):
            cmd = raw.get("cmd") or raw.get("command")
            if not cmd:
                raise ConfigError(f"command entry without cmd: {raw!r}")
            return cls(cmd=str(cmd), flags=_tags_of(raw))
        cmd, flags = parse_annotation(str(raw))
        if not cmd:
            raise ConfigError(f"command entry without cmd: {raw!r}")
        return cls(cmd=cmd, flags=flags)


@dataclass(frozen=True)
class Package:
    name: str
    mark: bool = False
    uninstall: bool = False
    flags: Tuple[Flag, ...] = ()

    def __str__(self) -> str:
        return self.name

    @classmethod
    def parse(cls, raw: Any) -> "Package":
        """Accept ``"!name # tag"`` or ``{"name": ..., "tags": [...]}``.

        ``!`` marks removal, ``=`` marks a pin/hold. Both may be given in
        either order; removal wins and the pin is dropped.
        """

        if raw is None:
            raise ConfigError("empty package entry")
        if isinstance(raw, dict):
            value = str(raw.get("name") or "")
            flags = _tags_of(raw)
            uninstall = bool(raw.get("uninstall", False))
            mark = bool(raw.get("mark", False))
        else:
            value, flags = parse_annotation(str(raw))
            uninstall = mark = False

        while value[:1] in ("!", "="):
            if value[0] == "!":
                uninstall = True
            else:
                mark = True
            value = value[1:]

        if not value:
            raise ConfigError(f"package entry without name: {raw!r}")
        if uninstall and mark:
            logger.warning("Package %s is both removed and pinned; removing", value)
            mark = False
        return cls(name=value, mark=mark, uninstall=uninstall, flags=flags)


@dataclass(frozen=True)
class PackageRepo:
    url: str
    gpg_key: str = ""
    channel: str = ""
    version_codename: str = ""
    name: str = ""
    extra_args: Dict[str, str] = field(default_factory=dict)
    flags: Tuple[Flag, ...] = ()

    @classmethod
    def parse(cls, raw: Any) -> "PackageRepo":
        if isinstance(raw, str):
            url, flags = parse_annotation(raw)
            return cls(url=url, flags=flags)
        if not isinstance(raw, dict) or not raw.get("url"):
            raise ConfigError(f"package repo must have a url: {raw!r}")
        return cls(
            url=str(raw["url"]),
            gpg_key=str(raw.get("gpg_key") or raw.get("gpgKey") or ""),
            channel=str(raw.get("channel") or ""),
            version_codename=str(raw.get("version_codename") or ""),
            name=str(raw.get("name") or ""),
            extra_args=_str_map(raw.get("extra_args"), "package repo extra_args"),
            flags=_tags_of(raw),
        )


@dataclass(frozen=True)
class File:
    content: str = ""
    content_from_url: str = ""
    content_from_file: str = ""
    template: str = ""
    permissions: str = ""
    owner: str = ""
    flags: Tuple[Flag, ...] = ()

    @classmethod
    def parse(cls, raw: Any) -> "File":
        if isinstance(raw, str):
            return cls(content=raw)
        if not isinstance(raw, dict):
            raise ConfigError(f"filesystem entry must be a mapping: {raw!r}")
        return cls(
            content=str(raw.get("content") or ""),
            content_from_url=str(raw.get("content_from_url") or ""),
            content_from_file=str(raw.get("content_from_file") or ""),
            template=str(raw.get("template") or ""),
            permissions=str(raw.get("permissions") or ""),
            owner=str(raw.get("owner") or ""),
            flags=_tags_of(raw),
        )


Filesystem = Dict[str, File]


@dataclass
class Port:
    port: int
    target: int = 0


@dataclass
class Container:
    image: str
    service: str = ""
    env: Dict[str, str] = field(default_factory=dict)
    labels: Dict[str, str] = field(default_factory=dict)
    docker_opts: str = ""
    args: str = ""
    ports: List[Port] = field(default_factory=list)
    volumes: List[str] = field(default_factory=list)
    cpu: int = 0
    mem: int = 0
    network: str = ""
    replicas: int = 1


@dataclass
class ContainerRuntime:
    type: str = "docker"
    arg: str = ""
    options: str = ""
    version: str = ""


@dataclass
class Kubernetes:
    version: str = ""
    download_path: str = ""
    image_prefix: str = ""


@dataclass
class Service:
    name: str = ""
    exec_start: str = ""
    environment: Dict[str, str] = field(default_factory=dict)
    extra: Dict[str, Any] = field(default_factory=dict)


@dataclass
class Config:
    """The provisioning intent. Phases may append to or rewrite it."""

    pre_commands: List[Command] = field(default_factory=list)
    commands: List[Command] = field(default_factory=list)
    post_commands: List[Command] = field(default_factory=list)
    filesystem: Filesystem = field(default_factory=dict)
    files: Dict[str, str] = field(default_factory=dict)
    templates: Dict[str, str] = field(default_factory=dict)
    sysctls: Dict[str, str] = field(default_factory=dict)
    environment: Dict[str, str] = field(default_factory=dict)
    timezone: str = ""
    packages: List[Package] = field(default_factory=list)
    package_repos: List[PackageRepo] = field(default_factory=list)
    images: List[str] = field(default_factory=list)
    containers: List[Container] = field(default_factory=list)
    container_runtime: Optional[ContainerRuntime] = None
    kubernetes: Optional[Kubernetes] = None
    services: Dict[str, Service] = field(default_factory=dict)
    # Users and extra are carried through for downstream renderers.
    users: List[Dict[str, Any]] = field(default_factory=list)
    extra: Dict[str, Any] = field(default_factory=dict)


def _list(raw: Mapping[str, Any], key: str) -> List[Any]:
    v = raw.get(key)
    if v is None:
        return []
    if not isinstance(v, list):
        raise ConfigError(f"{key} must be a list")
    return v


def _container(raw: Any) -> Container:
    if not isinstance(raw, dict) or not raw.get("image"):
        raise ConfigError(f"container must have an image: {raw!r}")
    ports = []
    for p in raw.get("ports") or []:
        if isinstance(p, dict):
            ports.append(Port(port=int(p.get("port") or 0), target=int(p.get("target") or 0)))
        else:
            ports.append(Port(port=int(p)))
    return Container(
        image=str(raw["image"]),
        service=str(raw.get("service") or ""),
        env=_str_map(raw.get("env"), "container env"),
        labels=_str_map(raw.get("labels"), "container labels"),
        docker_opts=str(raw.get("docker_opts") or ""),
        args=str(raw.get("args") or ""),
        ports=ports,
        volumes=[str(v) for v in raw.get("volumes") or []],
        cpu=int(raw.get("cpu") or 0),
        mem=int(raw.get("mem") or 0),
        network=str(raw.get("network") or ""),
        replicas=int(raw.get("replicas") or 1),
    )


def config_from_dict(raw: Mapping[str, Any]) -> Config:
    """Decode a parsed document into a :class:`Config`.

    Unknown flag spellings anywhere in the document abort decoding.
    """

    cfg = Config(
        pre_commands=[Command.parse(c) for c in _list(raw, "pre_commands")],
        commands=[Command.parse(c) for c in _list(raw, "commands")],
        post_commands=[Command.parse(c) for c in _list(raw, "post_commands")],
        files=_str_map(raw.get("files"), "files"),
        templates=_str_map(raw.get("templates"), "templates"),
        sysctls=_str_map(raw.get("sysctls"), "sysctls"),
        environment=_str_map(raw.get("environment"), "environment"),
        timezone=str(raw.get("timezone") or ""),
        packages=[Package.parse(p) for p in _list(raw, "packages")],
        package_repos=[PackageRepo.parse(r) for r in _list(raw, "package_repos")],
        images=[str(i) for i in _list(raw, "images")],
        containers=[_container(c) for c in _list(raw, "containers")],
        users=[dict(u) for u in _list(raw, "users")],
        extra=dict(raw.get("extra") or {}),
    )

    fs = raw.get("filesystem") or {}
    if not isinstance(fs, dict):
        raise ConfigError("filesystem must be a mapping of path -> file")
    cfg.filesystem = {str(path): File.parse(f) for path, f in fs.items()}

    rt = raw.get("container_runtime")
    if rt:
        if not isinstance(rt, dict):
            raise ConfigError("container_runtime must be a mapping")
        cfg.container_runtime = ContainerRuntime(
            type=str(rt.get("type") or "docker").lower(),
            arg=str(rt.get("arg") or ""),
            options=str(rt.get("options") or ""),
            version=str(rt.get("version") or ""),
        )

    k8s = raw.get("kubernetes")
    if k8s:
        if not isinstance(k8s, dict):
            raise ConfigError("kubernetes must be a mapping")
        cfg.kubernetes = Kubernetes(
            version=str(k8s.get("version") or ""),
            download_path=str(k8s.get("download_path") or ""),
            image_prefix=str(k8s.get("image_prefix") or ""),
        )

    services = raw.get("services") or {}
    if not isinstance(services, dict):
        raise ConfigError("services must be a mapping of name -> service")
    for name, svc in services.items():
        svc = svc or {}
        cfg.services[str(name)] = Service(
            name=str(svc.get("name") or name),
            exec_start=str(svc.get("exec_start") or ""),
            environment=_str_map(svc.get("environment"), f"services.{name}.environment"),
            extra=dict(svc.get("extra") or {}),
        )

    return cfg
