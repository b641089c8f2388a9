import pytest

from firstboot.config import load_config, merge_documents
from firstboot.errors import ConfigError, UnknownFlagError


def test_merge_documents():
    base = {"packages": ["a"], "sysctls": {"x": 1}, "timezone": "UTC"}
    overlay = {"packages": ["b"], "sysctls": {"y": 2}, "timezone": "Europe/Paris"}
    assert merge_documents(base, overlay) == {
        "packages": ["a", "b"],
        "sysctls": {"x": 1, "y": 2},
        "timezone": "Europe/Paris",
    }


def test_load_config_merges_in_order(tmp_path):
    a = tmp_path / "a.yaml"
    b = tmp_path / "b.yml"
    a.write_text("packages:\n  - curl\ncommands:\n  - echo a\n", encoding="utf-8")
    b.write_text(
        "packages:\n  - '=!foo # photon3'\n  - name: jq\n    tags: [ubuntu]\n",
        encoding="utf-8",
    )
    cfg = load_config(str(a), str(b))
    assert [p.name for p in cfg.packages] == ["curl", "foo", "jq"]
    assert [c.cmd for c in cfg.commands] == ["echo a"]


def test_load_config_unknown_flag(tmp_path):
    p = tmp_path / "bad.yaml"
    p.write_text("commands:\n  - 'reboot # solaris'\n", encoding="utf-8")
    with pytest.raises(UnknownFlagError, match="solaris"):
        load_config(str(p))


def test_load_config_errors(tmp_path):
    with pytest.raises(ConfigError):
        load_config()
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "missing.yaml"))
    txt = tmp_path / "cfg.txt"
    txt.write_text("packages: []\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(str(txt))
    lst = tmp_path / "list.yaml"
    lst.write_text("- a\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(str(lst))
