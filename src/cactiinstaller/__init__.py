"""
cactiinstaller - Cacti network monitoring installer for Debian/Ubuntu hosts
"""

__version__ = "0.1.0"

from .core import CactiInstaller, InstallerError

__all__ = ["CactiInstaller", "InstallerError"]
