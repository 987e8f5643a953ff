"""Actionable error catalog for cactiinstaller."""

from typing import Dict

_ERROR_MESSAGES: Dict[str, Dict[str, str]] = {
    "not_root": {
        "what": "This installer must be run as root or with sudo.",
        "next": "Re-run the command with `sudo`.",
    },
    "insecure_http": {
        "what": "{label} uses insecure HTTP.",
        "next": "Switch to HTTPS or use `--allow-insecure-http` only for trusted mirrors.",
    },
    "invalid_identifier": {
        "what": "Invalid {label}: {value!r}.",
        "next": "Use only letters, digits and underscores (max 64 characters).",
    },
    "invalid_host": {
        "what": "Invalid database host: {value!r}.",
        "next": "Use a host name or IP address without quotes or spaces.",
    },
    "invalid_poller_choice": {
        "what": "Invalid poller choice: {value!r}.",
        "next": "Enter `1` for the cron poller or `2` for Cactid and Spine.",
    },
    "unit_file_missing": {
        "what": "Cactid service file not found at {path}.",
        "next": "Check that the Cacti checkout includes `service/cactid.service`.",
    },
    "config_template_missing": {
        "what": "Cacti config template not found at {path}.",
        "next": "Remove the incomplete Cacti directory and run the installer again.",
    },
}


def actionable_error(code: str, **kwargs: str) -> str:
    if code not in _ERROR_MESSAGES:
        raise KeyError(f"Unknown error catalog key: {code}")

    template = _ERROR_MESSAGES[code]
    what = template["what"].format(**kwargs)
    next_step = template["next"].format(**kwargs)
    return f"{what} Suggested action: {next_step}"
