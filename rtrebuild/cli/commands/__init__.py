"""CLI commands: rebuild, check, options."""

from rtrebuild.cli.commands.check import command as check_command
from rtrebuild.cli.commands.options import command as options_command
from rtrebuild.cli.commands.rebuild import command as rebuild_command

__all__ = ["check_command", "options_command", "rebuild_command"]
