import subprocess

import pytest

import cactiinstaller.services.system_info as system_info_module
from cactiinstaller.errors import InstallerError
from cactiinstaller.services.system_info import SystemInfoService


class DummyLogger:
    def warning(self, *_args, **_kwargs):
        return None


def _completed(cmd, returncode=0, stdout=""):
    return subprocess.CompletedProcess(cmd, returncode, stdout=stdout, stderr="")


def test_is_root_uses_effective_uid():
    assert SystemInfoService(DummyLogger(), geteuid=lambda: 0).is_root() is True
    assert SystemInfoService(DummyLogger(), geteuid=lambda: 1000).is_root() is False


@pytest.mark.parametrize(
    "ram_mb, expected",
    [(8192, 5734), (1024, 716), (1000, 700), (1, 0), (0, 0), (16384, 11468)],
)
def test_buffer_pool_is_seventy_percent_of_ram_rounded_down(ram_mb, expected):
    assert SystemInfoService.buffer_pool_size_mb(ram_mb) == expected


def test_total_memory_reads_meminfo_in_megabytes(tmp_path):
    meminfo = tmp_path / "meminfo"
    meminfo.write_text("MemTotal:        8388608 kB\nMemFree:          123456 kB\n", encoding="utf-8")

    assert SystemInfoService(DummyLogger()).total_memory_mb(str(meminfo)) == 8192


def test_total_memory_raises_without_memtotal(tmp_path):
    meminfo = tmp_path / "meminfo"
    meminfo.write_text("MemFree: 1 kB\n", encoding="utf-8")

    with pytest.raises(InstallerError, match="MemTotal"):
        SystemInfoService(DummyLogger()).total_memory_mb(str(meminfo))


def test_detect_timezone_returns_timedatectl_value():
    service = SystemInfoService(DummyLogger())

    timezone = service.detect_timezone(
        lambda cmd, check=False, capture_output=True: _completed(cmd, stdout="Europe/Lisbon\n")
    )

    assert timezone == "Europe/Lisbon"


def test_detect_timezone_falls_back_to_utc_on_failure():
    service = SystemInfoService(DummyLogger())

    timezone = service.detect_timezone(
        lambda cmd, check=False, capture_output=True: _completed(cmd, returncode=1)
    )

    assert timezone == "UTC"


def test_invoking_user_home_prefers_sudo_user(monkeypatch):
    class FakePasswd:
        pw_dir = "/home/operator"
        pw_gid = 1000

    monkeypatch.setattr(system_info_module.pwd, "getpwnam", lambda name: FakePasswd())
    service = SystemInfoService(DummyLogger())

    home = service.invoking_user_home({"SUDO_USER": "operator", "HOME": "/root"})

    assert home == "/home/operator"


def test_invoking_user_home_falls_back_to_home():
    service = SystemInfoService(DummyLogger())

    assert service.invoking_user_home({"HOME": "/root"}) == "/root"


def test_detect_web_server_owner_skips_root_master_process(monkeypatch):
    ps_output = "USER     COMMAND\nroot     systemd\nroot     apache2\nwww-data apache2\nwww-data apache2\n"
    service = SystemInfoService(DummyLogger())
    monkeypatch.setattr(service, "primary_group", lambda user: f"{user}-group")

    user, group = service.detect_web_server_owner(
        lambda cmd, check=False, capture_output=True: _completed(cmd, stdout=ps_output)
    )

    assert (user, group) == ("www-data", "www-data-group")


def test_detect_web_server_owner_uses_fallback_when_not_running(monkeypatch):
    service = SystemInfoService(DummyLogger())
    monkeypatch.setattr(service, "primary_group", lambda user: user)

    user, group = service.detect_web_server_owner(
        lambda cmd, check=False, capture_output=True: _completed(cmd, stdout="USER COMMAND\n"),
        fallback_user="apache",
    )

    assert (user, group) == ("apache", "apache")
