"""Command Line Interface Package"""

from commitcraft.cli.main import main

__all__ = ["main"]
