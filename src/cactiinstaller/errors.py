"""Domain errors for cactiinstaller."""


class InstallerError(RuntimeError):
    """Raised when a provisioning step fails and the install cannot continue."""


class OperatorExit(Exception):
    """Raised when the operator asks to stop the install at a prompt."""
