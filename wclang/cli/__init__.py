"""
wclang command-line interface.
"""

from .main import DriverCLI, configure_logging, main, run

__all__ = ["DriverCLI", "configure_logging", "main", "run"]
