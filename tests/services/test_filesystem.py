import os

import pytest

import cactiinstaller.services.filesystem as filesystem_module
from cactiinstaller.errors import InstallerError
from cactiinstaller.services.filesystem import FileSystemService


class DummyLogger:
    def debug(self, *_args, **_kwargs):
        return None

    def warning(self, *_args, **_kwargs):
        return None


class DummyConsole:
    def print(self, *_args, **_kwargs):
        return None


def _service():
    return FileSystemService(logger=DummyLogger(), console=DummyConsole())


def test_touch_keeps_existing_content(tmp_path):
    target = tmp_path / "cacti.log"
    target.write_text("existing\n", encoding="utf-8")

    _service().touch(str(target), mode=0o644)

    assert target.read_text(encoding="utf-8") == "existing\n"
    assert oct(os.stat(target).st_mode & 0o777) == oct(0o644)


def test_write_text_applies_mode(tmp_path):
    target = tmp_path / "spine.sh"

    _service().write_text(str(target), "export PATH=$PATH:/usr/local/spine/bin\n", mode=0o755)

    assert target.read_text(encoding="utf-8").startswith("export PATH")
    assert oct(os.stat(target).st_mode & 0o777) == oct(0o755)


def test_set_tree_owner_visits_every_entry(tmp_path, monkeypatch):
    (tmp_path / "log").mkdir()
    (tmp_path / "log" / "cacti.log").write_text("", encoding="utf-8")
    owned = []
    monkeypatch.setattr(
        filesystem_module.shutil, "chown", lambda path, user=None, group=None: owned.append(path)
    )

    _service().set_tree_owner(str(tmp_path), "www-data", "www-data")

    assert sorted(owned) == sorted(
        [str(tmp_path), str(tmp_path / "log"), str(tmp_path / "log" / "cacti.log")]
    )


def test_set_owner_reports_unknown_user(tmp_path, monkeypatch):
    def fake_chown(path, user=None, group=None):
        raise LookupError(f"no such user: {user!r}")

    monkeypatch.setattr(filesystem_module.shutil, "chown", fake_chown)

    with pytest.raises(InstallerError, match="Failed to change owner"):
        _service().set_owner(str(tmp_path), "nobody-here", "nobody-here")
