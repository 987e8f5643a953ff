"""Subprocess execution service for cactiinstaller."""

import shutil
import subprocess
from typing import List, Optional

from cactiinstaller.errors import InstallerError


class CommandRunner:
    """Runs external commands and turns failures into InstallerError."""

    def __init__(self, logger, default_timeout: Optional[float] = None):
        self.logger = logger
        self.default_timeout = default_timeout

    def which(self, name: str) -> Optional[str]:
        return shutil.which(name)

    def run(
        self,
        cmd: List[str],
        check: bool = True,
        capture_output: bool = False,
        input_text: Optional[str] = None,
        input_file: Optional[str] = None,
        cwd: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> subprocess.CompletedProcess:
        cmd_str = " ".join(cmd)
        self.logger.debug("Executing: %s", cmd_str)

        effective_timeout = timeout if timeout is not None else self.default_timeout
        stdin_handle = None

        try:
            if input_file is not None:
                stdin_handle = open(input_file, "r", encoding="utf-8", errors="replace")
            result = subprocess.run(
                cmd,
                text=True,
                input=input_text,
                stdin=stdin_handle,
                capture_output=capture_output,
                cwd=cwd,
                timeout=effective_timeout,
            )
        except FileNotFoundError as exc:
            if input_file is not None and stdin_handle is None:
                raise InstallerError(f"Input file not found: {input_file}") from exc
            raise InstallerError(
                f"Required command not found: {cmd[0]}. Please install it and try again."
            ) from exc
        except subprocess.TimeoutExpired as exc:
            raise InstallerError(f"Command timed out after {effective_timeout}s: {cmd_str}") from exc
        except OSError as exc:
            raise InstallerError(f"Failed to execute command: {cmd_str}. {exc}") from exc
        finally:
            if stdin_handle is not None:
                stdin_handle.close()

        if capture_output and result.stdout:
            self.logger.debug("Command output: %s", result.stdout.strip())

        if result.returncode == 0:
            return result

        stderr = (result.stderr or "").strip() if capture_output else ""
        message = f"Command failed ({result.returncode}): {cmd_str}"
        if stderr:
            message = f"{message}\n{stderr}"

        if check:
            raise InstallerError(message)

        self.logger.debug(message)
        return result
