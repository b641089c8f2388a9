import pytest


@pytest.fixture
def os_release(tmp_path):
    """Write an os-release file and return its path."""

    counter = iter(range(1_000_000))

    def write(**fields):
        d = tmp_path / f"os-release-{next(counter)}"
        d.mkdir()
        p = d / "os-release"
        p.write_text("".join(f'{k}="{v}"\n' for k, v in fields.items()), encoding="utf-8")
        return str(p)

    return write


@pytest.fixture
def photon3(os_release):
    return os_release(ID="photon", VERSION_ID="3.0", NAME="VMware Photon OS")


@pytest.fixture
def ubuntu(os_release):
    return os_release(ID="ubuntu", VERSION_ID="22.04", VERSION_CODENAME="jammy")
