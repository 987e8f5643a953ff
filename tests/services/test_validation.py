import pytest

from cactiinstaller.errors import InstallerError
from cactiinstaller.services.validation import ValidationService


class DummyLogger:
    def warning(self, *_args, **_kwargs):
        return None

    def debug(self, *_args, **_kwargs):
        return None


class DummyConsole:
    def print(self, *_args, **_kwargs):
        return None


class FakeResponse:
    def raise_for_status(self):
        return None

    def close(self):
        return None


class FakeRequests:
    class RequestException(Exception):
        pass

    def __init__(self, fail_methods=()):
        self.fail_methods = set(fail_methods)
        self.calls = []

    def request(self, method, url, **_kwargs):
        self.calls.append((method, url))
        if method in self.fail_methods:
            raise self.RequestException(f"{method} refused")
        return FakeResponse()


@pytest.mark.parametrize("value", ["cacti", "cacti_user", "Cacti2"])
def test_validate_identifier_accepts_safe_names(value):
    assert ValidationService().validate_identifier(value, "database name") == value


@pytest.mark.parametrize("value", ["", "cacti; DROP DATABASE mysql", "ca'cti", "a" * 65])
def test_validate_identifier_rejects_unsafe_names(value):
    with pytest.raises(InstallerError, match="Invalid database name"):
        ValidationService().validate_identifier(value, "database name")


def test_validate_host_rejects_quotes():
    with pytest.raises(InstallerError, match="Invalid database host"):
        ValidationService().validate_host("localhost'")


def test_http_repository_is_blocked_by_default():
    fake_requests = FakeRequests()
    service = ValidationService(requests_module=fake_requests)

    with pytest.raises(InstallerError, match="insecure HTTP"):
        service.probe_repository(
            "http://example.com/cacti.git", "Cacti repository", DummyLogger(), DummyConsole()
        )

    assert fake_requests.calls == []


def test_probe_repository_falls_back_to_get():
    fake_requests = FakeRequests(fail_methods={"HEAD"})
    service = ValidationService(requests_module=fake_requests)

    service.probe_repository(
        "https://github.com/Cacti/cacti.git", "Cacti repository", DummyLogger(), DummyConsole()
    )

    assert [method for method, _ in fake_requests.calls] == ["HEAD", "GET"]


def test_probe_repository_raises_when_unreachable():
    fake_requests = FakeRequests(fail_methods={"HEAD", "GET"})
    service = ValidationService(requests_module=fake_requests)

    with pytest.raises(InstallerError, match="Spine repository is not accessible"):
        service.probe_repository(
            "https://github.com/Cacti/spine.git", "Spine repository", DummyLogger(), DummyConsole()
        )


def test_probe_repository_skips_non_http_remotes():
    fake_requests = FakeRequests()
    service = ValidationService(requests_module=fake_requests)

    service.probe_repository("git@github.com:Cacti/cacti.git", "Cacti repository", DummyLogger(), DummyConsole())

    assert fake_requests.calls == []
