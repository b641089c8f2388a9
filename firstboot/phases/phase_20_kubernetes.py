from __future__ import annotations

import logging
from typing import List, Tuple

from ..context import SystemContext
from ..flags import Flag
from ..types import Command, Config, File, Filesystem, Package

logger = logging.getLogger(__name__)


MODULES_FILE = "/etc/modules-load.d/kubernetes.conf"

KUBERNETES_PACKAGES = ["kubelet", "kubeadm", "kubectl"]

KUBERNETES_SYSCTLS = {
    "net.bridge.bridge-nf-call-iptables": "1",
    "net.bridge.bridge-nf-call-ip6tables": "1",
    "net.ipv4.ip_forward": "1",
}


class KubernetesPhase:
    phase_id = "20_kubernetes"

    def process_flags(self, cfg: Config, ctx: SystemContext) -> SystemContext:
        if cfg.kubernetes is None:
            return ctx
        return ctx.with_flags(Flag.KUBERNETES)

    def apply(self, cfg: Config, ctx: SystemContext) -> Tuple[List[Command], Filesystem]:
        k8s = cfg.kubernetes
        if k8s is None:
            return [], {}
        if not k8s.version:
            raise ValueError("kubernetes.version is required")

        # installed at, and held to, the requested version
        for name in KUBERNETES_PACKAGES:
            cfg.packages.append(Package(name=f"{name}={k8s.version}", mark=True))

        for key, value in KUBERNETES_SYSCTLS.items():
            cfg.sysctls.setdefault(key, value)

        cfg.commands.append(Command("swapoff -a"))
        cfg.commands.append(Command("sed -i '/ swap / s/^/#/' /etc/fstab"))
        cfg.commands.append(Command("systemctl enable kubelet"))
        if k8s.image_prefix:
            cfg.commands.append(
                Command(
                    f"kubeadm config images pull --kubernetes-version {k8s.version} "
                    f"--image-repository {k8s.image_prefix}"
                )
            )

        logger.info("Kubernetes %s", k8s.version)
        # loaded before the sysctl phase sets net.bridge.*
        files = {MODULES_FILE: File(content="br_netfilter\n", permissions="0644")}
        return [Command("modprobe br_netfilter")], files
