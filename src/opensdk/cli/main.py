"""opensdk CLI entry point and process boundary.

:func:`run` executes the command tree and lets any error raised by a
handler propagate unchanged. :func:`main` is the only place errors are
turned into messages on stderr and exit codes; usage text is never
printed for errors.
"""

import sys
from typing import Any, List, Mapping, Optional

import click

from opensdk.cli.builder import CMD_NAME, cmd_root
from opensdk.cli.config import CLIContext, create_context
from opensdk.errors import OpensdkError

EXIT_SUCCESS = 0
EXIT_ERROR = 1
EXIT_USAGE = 2
EXIT_INTERRUPTED = 130  # 128 + SIGINT

# Module-level command tree for console scripts and CliRunner tests
cli = cmd_root()


def run_with_context(cli_context: CLIContext, argv: Optional[List[str]] = None) -> Any:
    """Execute the command tree with an existing context.

    Returns:
        The handler's return value (an exit code for ``--help``).

    Raises:
        Whatever the handler raised, unchanged.
    """
    return cmd_root().main(
        args=argv,
        prog_name=CMD_NAME,
        obj={"cli_context": cli_context},
        standalone_mode=False,
    )


def run(
    argv: Optional[List[str]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Any:
    """Build a fresh context from ``environ`` and execute the command tree."""
    return run_with_context(create_context(environ=environ), argv)


def _report(message: str, hint: Optional[str] = None) -> None:
    click.echo(f"Error: {message}", err=True)
    if hint:
        click.echo(f"Hint: {hint}", err=True)


def main(
    argv: Optional[List[str]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> int:
    """Run the CLI and translate the outcome into an exit code.

    Args:
        argv: Explicit argument list (defaults to ``sys.argv[1:]``).
        environ: Explicit environment (defaults to ``os.environ``).

    Returns:
        Process exit code.
    """
    try:
        result = run(argv, environ)
    except OpensdkError as e:
        _report(e.message, e.hint)
        return EXIT_ERROR
    except click.UsageError as e:
        _report(e.format_message())
        return EXIT_USAGE
    except click.ClickException as e:
        _report(e.format_message())
        return e.exit_code
    except click.Abort as e:
        click.echo("Aborted!", err=True)
        # click re-raises Ctrl+C as Abort
        if isinstance(e.__cause__ or e.__context__, KeyboardInterrupt):
            return EXIT_INTERRUPTED
        return EXIT_ERROR
    except KeyboardInterrupt:
        click.echo("Aborted!", err=True)
        return EXIT_INTERRUPTED

    if isinstance(result, int):
        return result
    return EXIT_SUCCESS


def cli_main() -> None:
    """Console-script entry point."""
    sys.exit(main())
