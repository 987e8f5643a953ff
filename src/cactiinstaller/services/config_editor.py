"""Structured editors for php.ini, systemd units and Cacti's config.php."""

import os
import re
from pathlib import Path
from typing import Dict, List

from cactiinstaller.errors import InstallerError


class KeyValueConfig:
    """Line-preserving editor for `key = value` style files.

    Setting a key replaces the first active line for that key, drops any later
    duplicates of it, and appends a new line when the key is absent. Comments
    and unrelated lines are kept as they are.
    """

    def __init__(self, text: str, delimiter: str = " = "):
        self.lines: List[str] = text.splitlines()
        self.delimiter = delimiter

    @classmethod
    def from_file(cls, path: str, delimiter: str = " = ") -> "KeyValueConfig":
        return cls(Path(path).read_text(encoding="utf-8", errors="replace"), delimiter=delimiter)

    @staticmethod
    def _key_pattern(key: str):
        return re.compile(rf"^{re.escape(key)}\s*=")

    def get(self, key: str):
        pattern = self._key_pattern(key)
        for line in self.lines:
            if pattern.match(line):
                return line.split("=", 1)[1].strip()
        return None

    def set(self, key: str, value: str) -> bool:
        """Returns True when an existing line was replaced, False when appended."""
        pattern = self._key_pattern(key)
        new_line = f"{key}{self.delimiter}{value}"
        replaced = False
        updated: List[str] = []

        for line in self.lines:
            if pattern.match(line):
                if not replaced:
                    updated.append(new_line)
                    replaced = True
                continue
            updated.append(line)

        if not replaced:
            updated.append(new_line)

        self.lines = updated
        return replaced

    def set_in_section(self, section: str, key: str, value: str) -> bool:
        """Like `set`, but a missing key is added at the end of `[section]`."""
        if self.get(key) is not None:
            return self.set(key, value)

        new_line = f"{key}{self.delimiter}{value}"
        header = f"[{section}]"
        if header not in (line.strip() for line in self.lines):
            self.lines.extend([header, new_line])
            return False

        start = next(index for index, line in enumerate(self.lines) if line.strip() == header)
        insert_at = start + 1
        for index in range(start + 1, len(self.lines)):
            stripped = self.lines[index].strip()
            if stripped.startswith("[") and stripped.endswith("]"):
                break
            if stripped:
                insert_at = index + 1

        self.lines.insert(insert_at, new_line)
        return False

    def render(self) -> str:
        return "\n".join(self.lines) + "\n"


class PhpConfigFile:
    """Edits `$variable = 'value';` assignments in a PHP config file."""

    def __init__(self, text: str):
        self.lines: List[str] = text.splitlines()

    @classmethod
    def from_file(cls, path: str) -> "PhpConfigFile":
        return cls(Path(path).read_text(encoding="utf-8", errors="replace"))

    def set_variable(self, name: str, value: str) -> bool:
        pattern = re.compile(rf"^(\${re.escape(name)}\s*=\s*).*$")
        escaped = value.replace("\\", "\\\\").replace("'", "\\'")

        for index, line in enumerate(self.lines):
            match = pattern.match(line)
            if match:
                self.lines[index] = f"{match.group(1)}'{escaped}';"
                return True

        self.lines.append(f"${name} = '{escaped}';")
        return False

    def render(self) -> str:
        return "\n".join(self.lines) + "\n"


class ConfigEditorService:
    """Applies key/value settings to every php.ini below a root directory."""

    def __init__(self, logger, console):
        self.logger = logger
        self.console = console

    def find_php_ini_files(self, root: str) -> List[str]:
        if not os.path.isdir(root):
            return []
        return sorted(str(path) for path in Path(root).rglob("php.ini") if path.is_file())

    def update_ini_file(self, path: str, settings: Dict[str, str]):
        try:
            config = KeyValueConfig.from_file(path)
        except OSError as exc:
            raise InstallerError(f"Could not read {path}: {exc}") from exc

        for key, value in settings.items():
            action = "Updated" if config.set(key, str(value)) else "Added"
            self.logger.info("%s %s = %s in %s", action, key, value, path)

        try:
            Path(path).write_text(config.render(), encoding="utf-8")
        except OSError as exc:
            raise InstallerError(f"Could not write {path}: {exc}") from exc

    def update_php_settings(self, root: str, settings: Dict[str, str]) -> List[str]:
        ini_files = self.find_php_ini_files(root)
        if not ini_files:
            self.logger.warning("No php.ini files found under %s", root)
            return []

        for ini_file in ini_files:
            self.update_ini_file(ini_file, settings)
        return ini_files

    def set_unit_owner(self, unit_path: str, user: str, group: str):
        try:
            unit = KeyValueConfig.from_file(unit_path, delimiter="=")
            unit.set_in_section("Service", "User", user)
            unit.set_in_section("Service", "Group", group)
            Path(unit_path).write_text(unit.render(), encoding="utf-8")
        except OSError as exc:
            raise InstallerError(f"Could not update service file {unit_path}: {exc}") from exc
        self.logger.info("Updated User and Group in %s to %s:%s", unit_path, user, group)
