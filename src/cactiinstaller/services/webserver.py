"""Apache virtual host configuration for Cacti."""

import os
from typing import Callable

from cactiinstaller.constants import APACHE_DEFAULT_SITE, APACHE_SITE_NAME, APACHE_SITES_DIR


class ApacheService:
    """Writes the Cacti site, swaps it in for the default site and restarts Apache."""

    def __init__(self, logger, console, filesystem_service, service_manager):
        self.logger = logger
        self.console = console
        self.filesystem_service = filesystem_service
        self.service_manager = service_manager

    @staticmethod
    def render_virtual_host(web_root: str, cacti_dir: str, server_name: str = "localhost") -> str:
        log_dir = os.path.join(web_root, "log")
        return f"""<VirtualHost *:80>
    ErrorLog {log_dir}/cacti_error.log
    CustomLog {log_dir}/cacti_access.log combined
    DocumentRoot {cacti_dir}
    ServerName {server_name}
    <Directory {cacti_dir}>
        Options Indexes FollowSymLinks MultiViews
        AllowOverride All
        Require all granted
    </Directory>
</VirtualHost>
"""

    def enable_module(self, module: str, run_cmd: Callable):
        run_cmd(["a2enmod", module], check=True, capture_output=True)
        self.service_manager.restart("apache2", run_cmd)
        self.console.print(f"[green]Apache module {module} enabled.[/green]")

    def configure_site(
        self,
        web_root: str,
        cacti_dir: str,
        run_cmd: Callable,
        sites_dir: str = APACHE_SITES_DIR,
    ) -> str:
        self.console.print("[blue]Configuring Apache VirtualHost for Cacti...[/blue]")
        site_path = os.path.join(sites_dir, APACHE_SITE_NAME)
        self.filesystem_service.write_text(site_path, self.render_virtual_host(web_root, cacti_dir))

        run_cmd(["a2dissite", APACHE_DEFAULT_SITE], check=False, capture_output=True)
        run_cmd(["a2ensite", APACHE_SITE_NAME], check=True, capture_output=True)
        self.service_manager.restart("apache2", run_cmd)
        self.console.print("[green]Apache configured.[/green]")
        return site_path
