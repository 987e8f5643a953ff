"""Cacti checkout, log directories and config.php."""

import os
from typing import Callable

from cactiinstaller.constants import CONFIG_MODE, DIR_MODE, FILE_MODE
from cactiinstaller.errors import InstallerError
from cactiinstaller.errors_catalog import actionable_error
from cactiinstaller.models import InstallContext
from cactiinstaller.services.config_editor import PhpConfigFile


class CactiAppService:
    """Places the Cacti sources and wires them to the database."""

    def __init__(self, logger, console, filesystem_service):
        self.logger = logger
        self.console = console
        self.filesystem_service = filesystem_service

    def fetch(self, repo_url: str, cacti_dir: str, run_cmd: Callable) -> bool:
        """Clones Cacti unless the directory exists. Returns True when cloned."""
        if os.path.isdir(cacti_dir):
            self.console.print("[yellow]Cacti directory already exists. Skipping git clone.[/yellow]")
            return False

        self.console.print("[blue]Cloning Cacti from GitHub...[/blue]")
        parent = os.path.dirname(cacti_dir.rstrip("/")) or "/"
        self.filesystem_service.ensure_dir(parent)
        run_cmd(
            ["git", "clone", repo_url, os.path.basename(cacti_dir.rstrip("/"))],
            check=True,
            cwd=parent,
        )
        return True

    def prepare_log_directories(self, context: InstallContext):
        user, group = context.web_user, context.web_group

        for log_dir in (
            os.path.join(context.web_root, "log"),
            os.path.join(context.cacti_dir, "log"),
        ):
            self.filesystem_service.ensure_dir(log_dir)
            self.filesystem_service.set_tree_owner(log_dir, user, group)
            self.filesystem_service.set_tree_permissions(log_dir, dir_mode=DIR_MODE, file_mode=FILE_MODE)

        cacti_log = os.path.join(context.cacti_dir, "log", "cacti.log")
        self.filesystem_service.touch(cacti_log, mode=FILE_MODE)
        self.filesystem_service.set_owner(cacti_log, user, group)

    @staticmethod
    def config_values(context: InstallContext) -> dict:
        return {
            "database_default": context.db_name,
            "database_username": context.db_user,
            "database_password": context.db_password,
            "database_hostname": context.db_host,
            "url_path": "/",
        }

    def write_config(self, context: InstallContext) -> str:
        self.console.print("[blue]Setting up Cacti config file...[/blue]")
        include_dir = os.path.join(context.cacti_dir, "include")
        template_path = os.path.join(include_dir, "config.php.dist")
        config_path = os.path.join(include_dir, "config.php")

        if not os.path.isfile(template_path):
            raise InstallerError(actionable_error("config_template_missing", path=template_path))

        self.filesystem_service.copy_file(template_path, config_path)
        try:
            config = PhpConfigFile.from_file(config_path)
        except OSError as exc:
            raise InstallerError(f"Could not read {config_path}: {exc}") from exc

        for name, value in self.config_values(context).items():
            if not config.set_variable(name, value):
                self.logger.warning("$%s not found in %s. Appended it.", name, config_path)

        self.filesystem_service.write_text(config_path, config.render(), mode=CONFIG_MODE)
        self.filesystem_service.set_tree_owner(context.cacti_dir, context.web_user, context.web_group)
        self.console.print("[green]Cacti config file updated.[/green]")
        return config_path
