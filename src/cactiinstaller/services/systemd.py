"""systemd service lifecycle helpers."""

from typing import Callable


class ServiceManager:
    """Restarts, enables and starts units through systemctl."""

    def __init__(self, logger, console):
        self.logger = logger
        self.console = console

    def restart(self, unit: str, run_cmd: Callable):
        self.logger.info("Restarting %s...", unit)
        run_cmd(["systemctl", "restart", unit], check=True)

    def reload_units(self, run_cmd: Callable):
        run_cmd(["systemctl", "daemon-reload"], check=True)

    def enable_and_start(self, unit: str, run_cmd: Callable):
        run_cmd(["systemctl", "enable", unit], check=True)
        run_cmd(["systemctl", "start", unit], check=True)
        run_cmd(["systemctl", "status", unit, "--no-pager"], check=True, capture_output=True)
        self.console.print(f"[green]{unit} service installed and running.[/green]")
