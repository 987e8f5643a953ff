"""Input and repository URL validation helpers for cactiinstaller."""

import re
from typing import Optional
from urllib.parse import urlparse

import requests

from cactiinstaller.errors import InstallerError
from cactiinstaller.errors_catalog import actionable_error


class ValidationService:
    """Validates SQL identifiers, host names and repository URLs."""

    IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z0-9_]{1,64}$")
    HOST_PATTERN = re.compile(r"^[A-Za-z0-9_.:%-]{1,255}$")

    def __init__(self, allow_insecure_http: bool = False, requests_module=requests):
        self.allow_insecure_http = allow_insecure_http
        self.requests = requests_module

    def validate_identifier(self, value: str, label: str) -> str:
        if not isinstance(value, str) or not self.IDENTIFIER_PATTERN.match(value):
            raise InstallerError(actionable_error("invalid_identifier", label=label, value=value))
        return value

    def validate_host(self, value: str) -> str:
        if not isinstance(value, str) or not self.HOST_PATTERN.match(value):
            raise InstallerError(actionable_error("invalid_host", value=value))
        return value

    def is_url(self, location: str) -> bool:
        scheme = urlparse(location).scheme.lower()
        return scheme in {"http", "https"}

    def enforce_https_policy(self, location: str, label: str, logger, console):
        if not self.is_url(location):
            return

        scheme = urlparse(location).scheme.lower()
        if scheme == "http" and not self.allow_insecure_http:
            raise InstallerError(actionable_error("insecure_http", label=label))

        if scheme == "http" and self.allow_insecure_http:
            logger.warning("Insecure HTTP enabled for %s: %s", label, location)
            console.print(
                f"[yellow]Warning:[/yellow] Using insecure HTTP for {label}. "
                "Prefer HTTPS whenever possible."
            )

    def probe_repository(self, location: str, label: str, logger, console):
        """Checks that a git remote answers before anything is cloned from it."""
        self.enforce_https_policy(location, label, logger, console)
        if not self.is_url(location):
            logger.debug("Skipping reachability probe for non-HTTP remote %s", location)
            return

        last_error: Optional[Exception] = None
        for method in ("HEAD", "GET"):
            try:
                response = self.requests.request(
                    method,
                    location,
                    allow_redirects=True,
                    timeout=30,
                    stream=(method == "GET"),
                )
                response.raise_for_status()
                response.close()
                return
            except self.requests.RequestException as exc:
                last_error = exc

        raise InstallerError(f"{label} is not accessible: {last_error}")
