"""Poller setup: cron entry, or the Cactid service plus a Spine build."""

import os
from typing import Callable, Optional

from cactiinstaller.constants import (
    SCRIPT_MODE,
    SPINE_BIN_DIR,
    SPINE_BUILD_PACKAGES,
    SPINE_PROFILE_SCRIPT,
    SPINE_SOURCE_DIR,
    SYSCONFIG_DIR,
    SYSTEMD_UNIT_DIR,
)
from cactiinstaller.errors import InstallerError
from cactiinstaller.errors_catalog import actionable_error
from cactiinstaller.models import InstallContext, PollerMode


class PollerService:
    PROMPT_KEY = "poller"

    def __init__(
        self,
        logger,
        console,
        filesystem_service,
        config_editor,
        service_manager,
        package_service,
        system_info,
    ):
        self.logger = logger
        self.console = console
        self.filesystem_service = filesystem_service
        self.config_editor = config_editor
        self.service_manager = service_manager
        self.package_service = package_service
        self.system_info = system_info

    @staticmethod
    def parse_choice(answer: str) -> PollerMode:
        try:
            return PollerMode(answer.strip())
        except ValueError:
            raise InstallerError(actionable_error("invalid_poller_choice", value=answer)) from None

    def choose(self, prompter) -> PollerMode:
        self.console.print("Choose Cacti poller type:")
        self.console.print("1) Cron Poller (1-minute interval)")
        self.console.print("2) Install Cactid and Spine")
        return self.parse_choice(prompter.ask(self.PROMPT_KEY, "Enter choice [1 or 2]"))

    @staticmethod
    def cron_line(cacti_dir: str) -> str:
        poller = os.path.join(cacti_dir, "poller.php")
        log = os.path.join(cacti_dir, "poller.log")
        return f"* * * * * php {poller} > {log} 2>&1"

    def setup_cron(self, context: InstallContext, run_cmd: Callable) -> str:
        self.console.print("[blue]Setting up Cron poller...[/blue]")
        poller_log = os.path.join(context.cacti_dir, "poller.log")
        self.filesystem_service.touch(poller_log)
        self.filesystem_service.set_owner(poller_log, context.web_user, context.web_group)

        current = run_cmd(["crontab", "-l"], check=False, capture_output=True)
        existing = (current.stdout or "") if current.returncode == 0 else ""
        entry = self.cron_line(context.cacti_dir)

        if entry in existing.splitlines():
            self.logger.warning("An identical poller entry is already scheduled: %s", entry)

        lines = existing.rstrip("\n")
        crontab = f"{lines}\n{entry}\n" if lines else f"{entry}\n"
        run_cmd(["crontab", "-"], check=True, capture_output=True, input_text=crontab)
        self.console.print("[green]Cron poller set up at 1-minute intervals.[/green]")
        return entry

    def install_cactid(self, context: InstallContext, run_cmd: Callable, unit_dir: str = SYSTEMD_UNIT_DIR):
        self.console.print("[blue]Setting up Cactid poller...[/blue]")
        unit_source = os.path.join(context.cacti_dir, "service", "cactid.service")
        if not os.path.isfile(unit_source):
            raise InstallerError(actionable_error("unit_file_missing", path=unit_source))

        self.filesystem_service.ensure_dir(SYSCONFIG_DIR)
        user, group = self.system_info.detect_web_server_owner(run_cmd, fallback_user=context.web_user)
        self.config_editor.set_unit_owner(unit_source, user, group)

        unit_target = os.path.join(unit_dir, "cactid.service")
        self.filesystem_service.copy_file(unit_source, unit_target)
        self.filesystem_service.touch(os.path.join(SYSCONFIG_DIR, "cactid"))

        self.service_manager.reload_units(run_cmd)
        self.service_manager.enable_and_start("cactid", run_cmd)

    def install_spine(self, spine_repo: str, run_cmd: Callable, source_dir: Optional[str] = None):
        self.console.print("[blue]Installing Spine poller...[/blue]")
        source_dir = source_dir or SPINE_SOURCE_DIR
        self.package_service.install(SPINE_BUILD_PACKAGES, run_cmd)

        if os.path.isdir(source_dir):
            self.logger.info("Spine sources already present at %s. Skipping git clone.", source_dir)
        else:
            run_cmd(["git", "clone", spine_repo, source_dir], check=True)

        for step in (["./bootstrap"], ["./configure"], ["make"], ["make", "install"]):
            run_cmd(step, check=True, cwd=source_dir)

        self.filesystem_service.write_text(
            SPINE_PROFILE_SCRIPT,
            f"export PATH=$PATH:{SPINE_BIN_DIR}\n",
            mode=SCRIPT_MODE,
        )
        self.console.print("[green]Spine poller installed.[/green]")

    def setup_daemon(self, context: InstallContext, spine_repo: str, run_cmd: Callable):
        self.console.print("[blue]Installing Cactid and Spine...[/blue]")
        self.install_cactid(context, run_cmd)
        self.install_spine(spine_repo, run_cmd)
        self.console.print("[green]Cactid and Spine installed successfully.[/green]")

    def configure(self, context: InstallContext, prompter, spine_repo: str, run_cmd: Callable) -> PollerMode:
        mode = self.choose(prompter)
        if mode is PollerMode.CRON:
            self.setup_cron(context, run_cmd)
        else:
            self.setup_daemon(context, spine_repo, run_cmd)
        return mode
