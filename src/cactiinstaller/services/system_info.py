"""Host queries: privileges, timezone, memory, users."""

import grp
import os
import pwd
from typing import Callable, Mapping, Optional, Tuple

from cactiinstaller.constants import BUFFER_POOL_PERCENT, DEFAULT_TIMEZONE, MEMINFO_FILE
from cactiinstaller.errors import InstallerError


class SystemInfoService:
    """Reads facts about the host that the install depends on."""

    def __init__(self, logger, geteuid: Callable[[], int] = os.geteuid):
        self.logger = logger
        self.geteuid = geteuid

    def is_root(self) -> bool:
        return self.geteuid() == 0

    def detect_timezone(self, run_cmd: Callable) -> str:
        result = run_cmd(
            ["timedatectl", "show", "--property=Timezone", "--value"],
            check=False,
            capture_output=True,
        )
        timezone = (result.stdout or "").strip() if result.returncode == 0 else ""
        if not timezone:
            self.logger.warning(
                "Could not detect the system timezone. Falling back to %s.", DEFAULT_TIMEZONE
            )
            return DEFAULT_TIMEZONE
        return timezone

    def total_memory_mb(self, meminfo_path: str = MEMINFO_FILE) -> int:
        try:
            with open(meminfo_path, "r", encoding="utf-8") as file_obj:
                for line in file_obj:
                    if line.startswith("MemTotal:"):
                        return int(line.split()[1]) // 1024
        except (OSError, ValueError, IndexError) as exc:
            raise InstallerError(f"Could not read total memory from {meminfo_path}: {exc}") from exc

        raise InstallerError(f"MemTotal not found in {meminfo_path}.")

    @staticmethod
    def buffer_pool_size_mb(ram_mb: int) -> int:
        return ram_mb * BUFFER_POOL_PERCENT // 100

    def invoking_user_home(self, environ: Optional[Mapping[str, str]] = None) -> str:
        env = os.environ if environ is None else environ
        sudo_user = env.get("SUDO_USER")
        if sudo_user:
            try:
                return pwd.getpwnam(sudo_user).pw_dir
            except KeyError:
                self.logger.warning("SUDO_USER %s has no passwd entry.", sudo_user)
        return env.get("HOME") or os.path.expanduser("~")

    def detect_web_server_owner(
        self,
        run_cmd: Callable,
        process_name: str = "apache2",
        fallback_user: str = "www-data",
    ) -> Tuple[str, str]:
        """Returns the user and primary group running the web server workers.

        The parent apache2 process runs as root, so the first non-root owner
        wins. The fallback user is used when no worker is found.
        """
        result = run_cmd(["ps", "-eo", "user,comm"], check=False, capture_output=True)
        owners = []
        for line in (result.stdout or "").splitlines()[1:]:
            parts = line.split()
            if len(parts) >= 2 and process_name in parts[1]:
                owners.append(parts[0])

        user = next((owner for owner in owners if owner != "root"), None)
        if user is None:
            self.logger.warning(
                "No %s worker process found. Using %s as the service user.",
                process_name,
                fallback_user,
            )
            user = fallback_user

        return user, self.primary_group(user)

    def primary_group(self, user: str) -> str:
        try:
            return grp.getgrgid(pwd.getpwnam(user).pw_gid).gr_name
        except KeyError:
            self.logger.warning("Could not resolve the primary group of %s.", user)
            return user
