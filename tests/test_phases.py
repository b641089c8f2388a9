import pytest

from firstboot.context import SystemContext
from firstboot.errors import PhaseError
from firstboot.flags import Flag
from firstboot.main import build_context
from firstboot.phases import build_phases
from firstboot.phases.phase_60_services import ServicesPhase
from firstboot.pipeline import run_pipeline
from firstboot.platforms import detect_platform
from firstboot.types import config_from_dict


def compile_for(path, raw, tags=()):
    platform = detect_platform(path)
    ctx = build_context(platform, os_release=path, tags=tags)
    return run_pipeline(cfg=config_from_dict(raw), ctx=ctx, phases=build_phases(platform))


def test_photon3_combined_sigils_scenario(photon3):
    result = compile_for(photon3, {"packages": ["=!foo # photon3"]})
    assert result.context.flags == (Flag.PHOTON3, Flag.PHOTON)
    assert result.script_lines == ["tdnf remove -y foo"]


def test_packages_filtered_by_flags(photon3):
    raw = {
        "packages": [
            "curl",
            "vim # photon2",
            "jq # photon3 photon",
            {"name": "htop", "tags": ["ubuntu"]},
            "!nano",
        ]
    }
    result = compile_for(photon3, raw)
    assert result.script_lines == ["tdnf remove -y nano", "tdnf install -y curl jq"]


def test_ubuntu_packages_and_repos(ubuntu):
    raw = {
        "package_repos": [
            {"url": "https://apt.example", "name": "example", "channel": "stable", "tags": ["ubuntu"]},
            {"url": "https://yum.example", "name": "yum", "tags": ["redhatlike"]},
        ],
        "packages": ["curl", "=kubectl"],
    }
    lines = compile_for(ubuntu, raw).script_lines
    assert lines[0].splitlines()[1] == "deb https://apt.example jammy stable"
    assert lines[1:] == [
        "apt-get update",
        "DEBIAN_FRONTEND=noninteractive apt-get install -y --no-install-recommends curl kubectl",
        "apt-mark hold kubectl",
        "apt-get clean",
        "rm -rf /var/lib/apt/lists/*",
    ]


def test_command_order(photon3):
    raw = {
        "pre_commands": ["echo pre"],
        "commands": ["echo main", "echo ubuntu-only # ubuntu"],
        "post_commands": ["echo post # photon"],
    }
    assert compile_for(photon3, raw).script_lines == ["echo pre", "echo main", "echo post"]


def test_container_runtime_adds_flag_and_packages(ubuntu):
    raw = {
        "container_runtime": {"type": "docker", "options": '{"log-driver": "journald"}'},
        "images": ["nginx:1.25"],
        "commands": ["docker info # docker", "ctr version # containerd"],
    }
    result = compile_for(ubuntu, raw)
    assert result.context.has(Flag.DOCKER)
    lines = result.script_lines
    assert "DEBIAN_FRONTEND=noninteractive apt-get install -y --no-install-recommends docker.io" in lines
    assert lines[-4:] == ["docker info", "systemctl enable docker", "systemctl start docker", "docker pull nginx:1.25"]
    assert "ctr version" not in lines
    assert result.filesystem["/etc/docker/daemon.json"].content == '{"log-driver": "journald"}'


def test_unsupported_runtime_fails_phase(ubuntu):
    with pytest.raises(PhaseError) as exc:
        compile_for(ubuntu, {"container_runtime": {"type": "rkt"}})
    assert exc.value.phase_id == "10_container_runtime"


def test_kubernetes_on_photon(photon3):
    raw = {"kubernetes": {"version": "1.28.2"}, "commands": ["kubeadm version # kubernetes"]}
    result = compile_for(photon3, raw)
    lines = result.script_lines
    assert result.context.has(Flag.KUBERNETES)
    assert lines[0] == "modprobe br_netfilter"
    assert "sysctl -w net.ipv4.ip_forward=1" in lines
    assert "tdnf install -y kubelet-1.28.2 kubeadm-1.28.2 kubectl-1.28.2" in lines
    assert lines.index("kubeadm version") < lines.index("swapoff -a")
    assert "net.bridge.bridge-nf-call-iptables=1\n" in result.filesystem["/etc/sysctl.d/100-firstboot.conf"].content


def test_kubernetes_requires_version(photon3):
    with pytest.raises(PhaseError) as exc:
        compile_for(photon3, {"kubernetes": {"image_prefix": "registry.local"}})
    assert exc.value.phase_id == "20_kubernetes"


def test_user_tag_override(photon3):
    result = compile_for(photon3, {"commands": ["echo k8s # kubernetes"]}, tags=["kubernetes"])
    assert result.script_lines == ["echo k8s"]


def test_environment_timezone_and_files(photon3):
    raw = {
        "environment": {"HTTP_PROXY": "http://proxy:3128"},
        "timezone": "Europe/Berlin",
        "filesystem": {
            "/etc/motd": {"content": "hi"},
            "/etc/ubuntu-only": {"content": "x", "tags": ["ubuntu"]},
        },
        "files": {"/etc/app.conf": "app.conf"},
        "templates": {"/etc/app.env": "app.env.tpl"},
    }
    result = compile_for(photon3, raw)
    assert result.script_lines == ["timedatectl set-timezone Europe/Berlin"]
    assert result.filesystem["/etc/environment"].content == "HTTP_PROXY=http://proxy:3128\n"
    assert "/etc/ubuntu-only" not in result.filesystem
    assert result.filesystem["/etc/app.conf"].content_from_file == "app.conf"
    assert result.filesystem["/etc/app.env"].template == "app.env.tpl"


def test_services_use_renderer(photon3):
    platform = detect_platform(photon3)
    cfg = config_from_dict({"services": {"web": {"exec_start": "/usr/bin/web", "environment": {"PORT": "80"}}}})
    result = run_pipeline(
        cfg=cfg,
        ctx=SystemContext(flags=platform.get_tags(photon3)),
        phases=[ServicesPhase(render=lambda svc: f"unit for {svc.name}")],
    )
    assert result.script_lines == ["systemctl daemon-reload", "systemctl enable web", "systemctl start web"]
    assert result.filesystem["/etc/systemd/system/web.service"].content == "unit for web"


def test_default_unit_rendering(photon3):
    result = compile_for(photon3, {"services": {"web": {"exec_start": "/usr/bin/web", "environment": {"PORT": "80"}}}})
    unit = result.filesystem["/etc/systemd/system/web.service"].content
    assert "ExecStart=/usr/bin/web" in unit
    assert 'Environment="PORT=80"' in unit


def test_compilation_is_deterministic(ubuntu):
    raw = {
        "packages": ["b", "a", "c"],
        "sysctls": {"z": "1", "a": "2"},
        "kubernetes": {"version": "1.28.2"},
        "container_runtime": {"type": "containerd"},
        "commands": ["echo 1", "echo 2"],
    }
    first = compile_for(ubuntu, raw)
    second = compile_for(ubuntu, raw)
    assert first.script_lines == second.script_lines
    assert first.filesystem == second.filesystem


def test_repo_codename_never_read_from_build_host(monkeypatch, ubuntu):
    from firstboot.phases.phase_40_packages import PackagesPhase

    platform = detect_platform(ubuntu)
    monkeypatch.setattr(
        "firstboot.platforms.base.read_os_release",
        lambda path="/etc/os-release": {"ID": "ubuntu", "VERSION_CODENAME": "buildhost"},
    )
    cfg = config_from_dict({"package_repos": [{"url": "https://apt.example", "name": "example"}]})
    ctx = SystemContext(flags=(Flag.UBUNTU, Flag.DEBIAN_LIKE), vars={"version_codename": "jammy"})
    result = run_pipeline(cfg=cfg, ctx=ctx, phases=[PackagesPhase(platform)])
    assert result.script_lines[0].splitlines()[1] == "deb https://apt.example jammy main"

    bare = run_pipeline(cfg=cfg, ctx=SystemContext(flags=ctx.flags), phases=[PackagesPhase(platform)])
    assert "buildhost" not in bare.script_lines[0]
