"""Filesystem helpers for cactiinstaller."""

import logging
import os
import shutil
from pathlib import Path
from typing import Optional

from rich.console import Console

from cactiinstaller.errors import InstallerError


class FileSystemService:
    """Encapsulates file, ownership and permission side effects."""

    def __init__(self, logger: logging.Logger, console: Console):
        self.logger = logger
        self.console = console

    def ensure_dir(self, path: str, mode: Optional[int] = None):
        if os.path.isdir(path):
            self.logger.debug("Directory already exists: %s", path)
        else:
            try:
                os.makedirs(path, exist_ok=True)
            except OSError as exc:
                raise InstallerError(f"Failed to create directory {path}: {exc}") from exc
            self.logger.debug("Created directory: %s", path)
        if mode is not None:
            self.set_permissions(path, mode)

    def touch(self, path: str, mode: Optional[int] = None):
        try:
            Path(path).touch(exist_ok=True)
        except OSError as exc:
            raise InstallerError(f"Failed to create file {path}: {exc}") from exc
        if mode is not None:
            self.set_permissions(path, mode)

    def write_text(self, path: str, content: str, mode: Optional[int] = None):
        try:
            with open(path, "w", encoding="utf-8", newline="\n") as file_obj:
                file_obj.write(content)
        except OSError as exc:
            raise InstallerError(f"Failed to write {path}: {exc}") from exc
        self.logger.debug("Wrote %s", path)
        if mode is not None:
            self.set_permissions(path, mode)

    def copy_file(self, source: str, destination: str):
        try:
            shutil.copyfile(source, destination)
        except OSError as exc:
            raise InstallerError(f"Failed to copy {source} to {destination}: {exc}") from exc
        self.logger.debug("Copied %s to %s", source, destination)

    def set_permissions(self, path: str, mode: int):
        try:
            os.chmod(path, mode)
        except OSError as exc:
            self.logger.warning("Could not set permissions on %s: %s", path, exc)

    def set_owner(self, path: str, user: str, group: str):
        try:
            shutil.chown(path, user=user, group=group)
        except (OSError, LookupError) as exc:
            raise InstallerError(f"Failed to change owner of {path} to {user}:{group}: {exc}") from exc

    def set_tree_owner(self, root: str, user: str, group: str):
        if not os.path.exists(root):
            return

        self.set_owner(root, user, group)
        for current_root, dirs, files in os.walk(root):
            for name in dirs + files:
                path = os.path.join(current_root, name)
                if not os.path.islink(path):
                    self.set_owner(path, user, group)

    def set_tree_permissions(self, root: str, dir_mode: int, file_mode: int):
        if not os.path.exists(root):
            return

        self.set_permissions(root, dir_mode)
        for current_root, dirs, files in os.walk(root):
            for directory in dirs:
                self.set_permissions(os.path.join(current_root, directory), dir_mode)
            for file_name in files:
                self.set_permissions(os.path.join(current_root, file_name), file_mode)
