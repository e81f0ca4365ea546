"""opensdk CLI - command tree, configuration context and output.

The entry point lives in :mod:`opensdk.cli.main`; this package only
re-exports the helpers command modules build on.
"""

from opensdk.cli.config import CLIContext, create_context
from opensdk.cli.logging import (
    CLILogContext,
    cli_command,
    get_cli_logger,
    get_request_id,
    set_request_id,
)
from opensdk.cli.output import OUTPUT_FORMATS, cmd_print, emit
from opensdk.cli.validation import cmd_pre_run, flag_contains

__all__ = [
    # Context
    "CLIContext",
    "create_context",
    # Output
    "OUTPUT_FORMATS",
    "cmd_print",
    "emit",
    # Validation
    "cmd_pre_run",
    "flag_contains",
    # Logging
    "CLILogContext",
    "cli_command",
    "get_cli_logger",
    "get_request_id",
    "set_request_id",
]
