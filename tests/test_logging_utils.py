import logging

from firstboot.logging_utils import _open_log_file


def test_log_file_falls_back_to_working_directory(tmp_path, monkeypatch):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("", encoding="utf-8")
    monkeypatch.chdir(tmp_path)

    handler = _open_log_file(str(blocker / "firstboot.log"))
    try:
        assert isinstance(handler, logging.FileHandler)
        assert handler.baseFilename == str(tmp_path / "firstboot.log")
    finally:
        handler.close()


def test_log_file_created_with_parent_dirs(tmp_path):
    path = tmp_path / "logs" / "nested" / "fb.log"
    handler = _open_log_file(str(path))
    try:
        assert handler.baseFilename == str(path)
        assert path.parent.is_dir()
    finally:
        handler.close()
