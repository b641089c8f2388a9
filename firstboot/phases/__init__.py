from __future__ import annotations

from ..platforms.base import Platform
from .phase_00_pre_commands import PreCommandsPhase
from .phase_10_container_runtime import ContainerRuntimePhase
from .phase_20_kubernetes import KubernetesPhase
from .phase_30_sysctl import SysctlPhase
from .phase_35_environment import EnvironmentPhase
from .phase_40_packages import PackagesPhase
from .phase_50_files import FilesPhase
from .phase_60_services import ServicesPhase
from .phase_90_commands import CommandsPhase


def build_phases(platform: Platform):
    return [
        PreCommandsPhase(),
        ContainerRuntimePhase(),
        KubernetesPhase(),
        SysctlPhase(),
        EnvironmentPhase(),
        PackagesPhase(platform),
        FilesPhase(),
        ServicesPhase(),
        CommandsPhase(),
    ]


__all__ = [
    "PreCommandsPhase",
    "ContainerRuntimePhase",
    "KubernetesPhase",
    "SysctlPhase",
    "EnvironmentPhase",
    "PackagesPhase",
    "FilesPhase",
    "ServicesPhase",
    "CommandsPhase",
    "build_phases",
]
