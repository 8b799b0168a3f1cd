"""
CLI Commands.

Organized by command group.
"""

from yunxiao_cli.cli.commands.api import app as api_app
from yunxiao_cli.cli.commands.doctor import doctor

__all__ = [
    "api_app",
    "doctor",
]
