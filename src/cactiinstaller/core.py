import logging
import os
import secrets
import subprocess
from datetime import datetime
from typing import Dict, List, Optional

import requests
from rich.console import Console

from .constants import (
    APACHE_SITES_DIR,
    BASE_PACKAGES,
    CACTI_REPO_URL,
    DEFAULT_CACTI_DIR,
    DEFAULT_DB_HOST,
    DEFAULT_DB_NAME,
    DEFAULT_DB_USER,
    DEFAULT_LOG_FILE,
    DEFAULT_PHP_SETTINGS,
    DEFAULT_WEB_GROUP,
    DEFAULT_WEB_ROOT,
    DEFAULT_WEB_USER,
    LOG_FILE_MODE,
    MARIADB_TUNING_FILE,
    MEMINFO_FILE,
    PHP_INI_ROOT,
    SPINE_REPO_URL,
    ZONEINFO_DIR,
)
from .errors import InstallerError, OperatorExit
from .errors_catalog import actionable_error
from .models import InstallContext, PollerMode, SchemaChoice
from .services.cacti_app import CactiAppService
from .services.command_runner import CommandRunner
from .services.config_editor import ConfigEditorService
from .services.database import DatabaseService
from .services.filesystem import FileSystemService
from .services.packages import PackageService
from .services.poller import PollerService
from .services.prompts import ConsolePrompter, Prompter
from .services.schema import SchemaSelector
from .services.system_info import SystemInfoService
from .services.systemd import ServiceManager
from .services.validation import ValidationService
from .services.webserver import ApacheService

console = Console()
logger = logging.getLogger("cactiinstaller")


class CactiInstaller:
    def __init__(
        self,
        db_name: str = DEFAULT_DB_NAME,
        db_user: str = DEFAULT_DB_USER,
        db_host: str = DEFAULT_DB_HOST,
        web_root: str = DEFAULT_WEB_ROOT,
        cacti_dir: str = DEFAULT_CACTI_DIR,
        web_user: str = DEFAULT_WEB_USER,
        web_group: str = DEFAULT_WEB_GROUP,
        cacti_repo: str = CACTI_REPO_URL,
        spine_repo: str = SPINE_REPO_URL,
        log_file: Optional[str] = DEFAULT_LOG_FILE,
        php_settings: Optional[Dict[str, str]] = None,
        prompter: Optional[Prompter] = None,
        allow_insecure_http: bool = False,
        skip_repository_check: bool = False,
        command_timeout: Optional[float] = None,
        verbose: bool = False,
    ):
        self.validation_service = ValidationService(
            allow_insecure_http=allow_insecure_http,
            requests_module=requests,
        )
        self.db_name = self.validation_service.validate_identifier(db_name, "database name")
        self.db_user = self.validation_service.validate_identifier(db_user, "database user")
        self.db_host = self.validation_service.validate_host(db_host)

        self.web_root = web_root
        self.cacti_dir = cacti_dir
        self.web_user = web_user
        self.web_group = web_group
        self.cacti_repo = cacti_repo
        self.spine_repo = spine_repo
        self.log_file = log_file
        self.php_settings = dict(DEFAULT_PHP_SETTINGS)
        if php_settings:
            self.php_settings.update({str(key): str(value) for key, value in php_settings.items()})
        self.skip_repository_check = skip_repository_check
        self.verbose = verbose

        self.php_ini_root = PHP_INI_ROOT
        self.mariadb_tuning_file = MARIADB_TUNING_FILE
        self.apache_sites_dir = APACHE_SITES_DIR
        self.meminfo_file = MEMINFO_FILE
        self.zoneinfo_dir = ZONEINFO_DIR

        self.prompter = prompter or ConsolePrompter(console)
        self.command_runner = CommandRunner(logger=logger, default_timeout=command_timeout)
        self.system_info = SystemInfoService(logger=logger)
        self.filesystem_service = FileSystemService(logger=logger, console=console)
        self.config_editor = ConfigEditorService(logger=logger, console=console)
        self.package_service = PackageService(logger=logger, console=console)
        self.service_manager = ServiceManager(logger=logger, console=console)
        self.database_service = DatabaseService(
            logger=logger,
            console=console,
            filesystem_service=self.filesystem_service,
        )
        self.schema_selector = SchemaSelector(logger=logger, console=console, prompter=self.prompter)
        self.cacti_app_service = CactiAppService(
            logger=logger,
            console=console,
            filesystem_service=self.filesystem_service,
        )
        self.apache_service = ApacheService(
            logger=logger,
            console=console,
            filesystem_service=self.filesystem_service,
            service_manager=self.service_manager,
        )
        self.poller_service = PollerService(
            logger=logger,
            console=console,
            filesystem_service=self.filesystem_service,
            config_editor=self.config_editor,
            service_manager=self.service_manager,
            package_service=self.package_service,
            system_info=self.system_info,
        )

        self.context: Optional[InstallContext] = None
        self.php_version: Optional[str] = None
        self.schema: Optional[SchemaChoice] = None
        self.poller_mode: Optional[PollerMode] = None
        self.current_step_name: Optional[str] = None
        self._file_handler: Optional[logging.Handler] = None

    def _run_step(self, name: str, callback, *args, **kwargs):
        self.current_step_name = name
        logger.debug("Starting step: %s", name)
        result = callback(*args, **kwargs)
        logger.debug("Finished step: %s", name)
        self.current_step_name = None
        return result

    def _run_cmd(
        self,
        cmd: List[str],
        check: bool = True,
        capture_output: bool = False,
        **kwargs,
    ) -> subprocess.CompletedProcess:
        return self.command_runner.run(cmd, check=check, capture_output=capture_output, **kwargs)

    def preflight(self):
        if not self.system_info.is_root():
            raise InstallerError(actionable_error("not_root"))
        console.print("[green]Running as root. Proceeding...[/green]")

    def open_install_log(self):
        """Mirrors the installer log into a root-only file."""
        if not self.log_file:
            return

        self.filesystem_service.ensure_dir(os.path.dirname(self.log_file) or ".")
        self.filesystem_service.touch(self.log_file, mode=LOG_FILE_MODE)

        file_handler = logging.FileHandler(self.log_file)
        file_handler.setLevel(logging.DEBUG if self.verbose else logging.INFO)
        file_handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(message)s"))
        logger.addHandler(file_handler)
        self._file_handler = file_handler
        logger.info("Installation started at %s", datetime.now().isoformat(timespec="seconds"))

    def build_context(self) -> InstallContext:
        timezone = self.system_info.detect_timezone(self._run_cmd)
        ram_mb = self.system_info.total_memory_mb(self.meminfo_file)
        context = InstallContext(
            db_name=self.db_name,
            db_user=self.db_user,
            db_password=secrets.token_hex(16),
            db_host=self.db_host,
            timezone=timezone,
            ram_mb=ram_mb,
            buffer_pool_mb=self.system_info.buffer_pool_size_mb(ram_mb),
            log_file=self.log_file,
            web_root=self.web_root,
            cacti_dir=self.cacti_dir,
            web_user=self.web_user,
            web_group=self.web_group,
        )
        logger.info(
            "Detected timezone %s and %s MB of RAM (InnoDB buffer pool %s MB).",
            context.timezone,
            context.ram_mb,
            context.buffer_pool_mb,
        )
        return context

    def validate_repositories(self):
        repositories = [("Cacti repository", self.cacti_repo), ("Spine repository", self.spine_repo)]
        for label, location in repositories:
            if self.skip_repository_check:
                self.validation_service.enforce_https_policy(location, label, logger, console)
            else:
                self.validation_service.probe_repository(location, label, logger, console)

    def install_dependencies(self):
        console.print("[blue]Updating packages and installing dependencies...[/blue]")
        self.package_service.update_index(self._run_cmd)
        self.package_service.upgrade(self._run_cmd)
        self.package_service.install(BASE_PACKAGES, self._run_cmd)
        console.print("[green]Dependencies installed.[/green]")

    def ensure_php(self) -> str:
        return self.package_service.ensure_php(self._run_cmd, self.command_runner.which)

    def configure_php(self, context: InstallContext, php_version: str):
        console.print("[blue]Configuring PHP settings...[/blue]")
        settings = dict(self.php_settings)
        settings["date.timezone"] = context.timezone
        self.config_editor.update_php_settings(self.php_ini_root, settings)
        self.service_manager.restart(f"php{php_version}-fpm", self._run_cmd)
        self.service_manager.restart("apache2", self._run_cmd)
        console.print("[green]PHP settings applied and services restarted.[/green]")

    def configure_mariadb(self, context: InstallContext):
        self.database_service.write_tuning_config(self.mariadb_tuning_file, context.buffer_pool_mb)
        self.service_manager.restart("mariadb", self._run_cmd)
        console.print("[green]MariaDB settings optimized.[/green]")

    def fetch_cacti(self):
        self.cacti_app_service.fetch(self.cacti_repo, self.cacti_dir, self._run_cmd)

    def select_schema(self) -> SchemaChoice:
        home_dir = self.system_info.invoking_user_home()
        default_schema = os.path.join(self.cacti_dir, "cacti.sql")
        return self.schema_selector.select(home_dir, default_schema)

    def provision_database(self, context: InstallContext, schema: SchemaChoice) -> str:
        return self.database_service.provision(context, schema.path, self.prompter, self._run_cmd)

    def populate_timezones(self, context: InstallContext):
        self.database_service.populate_timezones(context, self._run_cmd, self.zoneinfo_dir)

    def enable_rewrite(self):
        self.apache_service.enable_module("rewrite", self._run_cmd)

    def prepare_log_directories(self, context: InstallContext):
        self.cacti_app_service.prepare_log_directories(context)

    def write_app_config(self, context: InstallContext) -> str:
        return self.cacti_app_service.write_config(context)

    def configure_webserver(self) -> str:
        return self.apache_service.configure_site(
            self.web_root,
            self.cacti_dir,
            self._run_cmd,
            sites_dir=self.apache_sites_dir,
        )

    def configure_poller(self, context: InstallContext) -> PollerMode:
        return self.poller_service.configure(context, self.prompter, self.spine_repo, self._run_cmd)

    def print_report(self, context: InstallContext):
        console.print("[bold green]Cacti installation complete! Access Cacti at http://localhost[/bold green]")
        console.print(f"Database Name: {context.db_name}")
        console.print(f"Database User: {context.db_user}")
        console.print(f"Database Password: {context.db_password}")

    def run(self) -> int:
        try:
            logger.info("Starting Cacti installation...")
            self._run_step("preflight", self.preflight)
            self._run_step("open_install_log", self.open_install_log)
            self.context = self._run_step("build_context", self.build_context)
            context = self.context

            self._run_step("validate_repositories", self.validate_repositories)
            self._run_step("install_dependencies", self.install_dependencies)
            self.php_version = self._run_step("ensure_php", self.ensure_php)
            self._run_step("configure_php", self.configure_php, context, self.php_version)
            self._run_step("configure_mariadb", self.configure_mariadb, context)
            self._run_step("fetch_cacti", self.fetch_cacti)

            self.schema = self._run_step("select_schema", self.select_schema)
            outcome = self._run_step("provision_database", self.provision_database, context, self.schema)
            logger.info("Database %s: %s", context.db_name, outcome)
            self._run_step("populate_timezones", self.populate_timezones, context)

            self._run_step("enable_rewrite", self.enable_rewrite)
            self._run_step("prepare_log_directories", self.prepare_log_directories, context)
            self._run_step("write_app_config", self.write_app_config, context)
            self._run_step("configure_webserver", self.configure_webserver)
            self.poller_mode = self._run_step("configure_poller", self.configure_poller, context)

            logger.info("Cacti installation finished with %s poller.", self.poller_mode.name.lower())
            self.print_report(context)
            return 0

        except OperatorExit as exc:
            console.print(f"[yellow]{exc}[/yellow]")
            logger.info("Installer stopped by the operator at step '%s'.", self.current_step_name)
            return 0
        except KeyboardInterrupt:
            console.print("[bold red]Operation cancelled by user.[/bold red]")
            logger.info("Operation cancelled by user")
            return 1
        except InstallerError as exc:
            step = self.current_step_name or "run"
            console.print(f"[bold red]Error in step '{step}':[/bold red] {exc}")
            logger.error("Step '%s' failed: %s", step, exc)
            return 1
        except Exception as exc:
            step = self.current_step_name or "run"
            console.print(f"[bold red]Unexpected error in step '{step}':[/bold red] {exc}")
            logger.exception("Unexpected error")
            return 1
        finally:
            if self._file_handler is not None:
                logger.removeHandler(self._file_handler)
                self._file_handler.close()
                self._file_handler = None
