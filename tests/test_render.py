import shutil
import subprocess

import pytest
import yaml

from firstboot.context import SystemContext
from firstboot.flags import Flag
from firstboot.pipeline import PipelineResult
from firstboot.render import to_dict, to_shell, to_yaml
from firstboot.types import Command, File


def make_result():
    return PipelineResult(
        commands=[Command("echo one"), Command("echo two")],
        filesystem={
            "/etc/a": File(content="a"),
            "/etc/b": File(content_from_url="https://example.com/b", owner="root:root"),
            "/etc/c": File(template="c.tpl"),
        },
        context=SystemContext(flags=(Flag.UBUNTU,), name="node"),
        ran_phases=[],
    )


def test_to_shell():
    script = to_shell(make_result())
    assert "curl -fsSL https://example.com/b -o /etc/b" in script
    assert "chown root:root /etc/b" in script
    assert "/etc/c" not in script
    assert script.rstrip().endswith("echo one\necho two")


def test_to_dict_and_yaml():
    doc = to_dict(make_result())
    assert doc["flags"] == ["ubuntu"]
    assert doc["files"]["/etc/c"] == {"template": "c.tpl"}
    assert yaml.safe_load(to_yaml(make_result())) == doc


bash = shutil.which("bash")


@pytest.mark.skipif(bash is None, reason="bash not available")
def test_shell_script_runs_with_spaces_and_terminator_in_content(tmp_path):
    target = tmp_path / "my dir" / "x.conf"
    marker = tmp_path / "marker"
    content = f"first\nFIRSTBOOT_EOF\ntouch {marker}\n"
    result = PipelineResult(
        commands=[],
        filesystem={str(target): File(content=content, permissions="0600")},
        context=SystemContext(),
        ran_phases=[],
    )
    script = tmp_path / "firstboot.sh"
    script.write_text(to_shell(result), encoding="utf-8")

    p = subprocess.run([bash, str(script)], stdout=subprocess.PIPE, stderr=subprocess.PIPE, text=True)
    assert p.returncode == 0, p.stderr
    assert target.read_text(encoding="utf-8") == content
    assert not marker.exists()
