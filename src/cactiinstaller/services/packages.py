"""APT package installation for cactiinstaller."""

from typing import Callable, List, Optional

from packaging import version

from cactiinstaller.constants import MIN_PHP_VERSION, PHP_PACKAGES
from cactiinstaller.errors import InstallerError


class PackageService:
    """Installs system packages and detects the PHP runtime."""

    def __init__(self, logger, console):
        self.logger = logger
        self.console = console

    def update_index(self, run_cmd: Callable):
        run_cmd(["apt", "update"], check=True)

    def upgrade(self, run_cmd: Callable):
        run_cmd(["apt", "upgrade", "-y", "-qq"], check=True)

    def install(self, packages: List[str], run_cmd: Callable):
        self.logger.info("Installing packages: %s", " ".join(packages))
        run_cmd(["apt", "install", "-y", "-qq"] + list(packages), check=True)

    def ensure_php(self, run_cmd: Callable, which: Callable[[str], Optional[str]]) -> str:
        if which("php"):
            self.logger.info("PHP is already installed. Skipping PHP packages.")
        else:
            self.console.print("[blue]PHP is not installed. Installing PHP...[/blue]")
            self.update_index(run_cmd)
            self.install(PHP_PACKAGES, run_cmd)

        php_version = self.get_php_version(run_cmd)
        self.console.print(f"[green]PHP version {php_version} is installed.[/green]")
        self.check_php_version(php_version)
        return php_version

    def get_php_version(self, run_cmd: Callable) -> str:
        result = run_cmd(
            ["php", "-r", "echo PHP_MAJOR_VERSION.'.'.PHP_MINOR_VERSION;"],
            check=True,
            capture_output=True,
        )
        php_version = (result.stdout or "").strip()
        if not php_version:
            raise InstallerError("Could not determine the installed PHP version.")
        return php_version

    def check_php_version(self, php_version: str) -> bool:
        try:
            supported = version.parse(php_version) >= version.parse(MIN_PHP_VERSION)
        except version.InvalidVersion:
            self.logger.warning("Unrecognized PHP version string: %s", php_version)
            return False

        if not supported:
            self.logger.warning(
                "PHP %s is older than %s. Cacti may not run correctly.",
                php_version,
                MIN_PHP_VERSION,
            )
        return supported
