"""Configuration commands for the opensdk CLI.

Inspect the resolved configuration and write values to the profile's
config file.
"""

from typing import Any, Dict, List

import click

from opensdk.cli.logging import (
    cli_command,
    get_cli_logger,
    redact_sensitive_data,
)
from opensdk.cli.output import cmd_print
from opensdk.cli.registry import get_context
from opensdk.config import (
    ConfigResolver,
    flatten_keys,
    read_config_file,
    write_config_value,
)
from opensdk.errors import CommandError

logger = get_cli_logger()


def _redacted(key: str, value: Any) -> Any:
    return redact_sensitive_data({key: value})[key]


def _as_text(value: Any) -> str:
    """Render a config value the way it is typed on the command line."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _resolver(ctx: click.Context) -> ConfigResolver:
    cli_ctx = get_context(ctx)
    if cli_ctx.resolver is None:
        raise RuntimeError("Config file has not been resolved yet.")
    return cli_ctx.resolver


@click.group("cfg")
def cfg() -> None:
    """Configuration inspection and editing."""
    pass


@cfg.command("show")
@click.option("--reveal", is_flag=True, help="Show secret values such as the access token.")
@click.option("--raw", is_flag=True, help="Print the loaded config file as stored on disk.")
@click.pass_context
@cli_command("cfg-show")
def cfg_show_cmd(ctx: click.Context, reveal: bool, raw: bool) -> None:
    """Show every resolved key with its value and source.

    Sources are flag, env, file and default. With --raw the loaded config
    file is printed verbatim instead, secrets included.
    """
    cli_ctx = get_context(ctx)
    config = cli_ctx.config

    if raw:
        if config.config_file is None:
            raise CommandError(
                "no config file loaded",
                hint="Run `opensdk cfg path` to see where config files are searched for.",
            )
        with open(config.config_file, "r", encoding="utf-8") as f:
            cmd_print(f)
        return

    values: Dict[str, Any] = config.to_dict()
    if not reveal:
        values = redact_sensitive_data(values)

    records: List[Dict[str, Any]] = [
        {"key": key, "value": value, "source": config.source(key)}
        for key, value in values.items()
    ]
    cli_ctx.emit(records)


@cfg.command("get")
@click.argument("key")
@click.option("--reveal", is_flag=True, help="Show the value even if it is a secret.")
@click.pass_context
@cli_command("cfg-get")
def cfg_get_cmd(ctx: click.Context, key: str, reveal: bool) -> None:
    """Show the resolved value of KEY."""
    cli_ctx = get_context(ctx)
    config = cli_ctx.config
    if key not in config:
        raise CommandError(f'key "{key}" is not set')

    value = config[key] if reveal else _redacted(key, config[key])
    cli_ctx.emit({"key": key, "value": value, "source": config.source(key)})


@cfg.command("path")
@click.pass_context
@cli_command("cfg-path")
def cfg_path_cmd(ctx: click.Context) -> None:
    """Show the config file in use and where it was searched for."""
    cli_ctx = get_context(ctx)
    resolver = _resolver(ctx)
    explicit = resolver.resolve_file()

    data: Dict[str, Any] = {
        "config_file": str(cli_ctx.config.config_file) if cli_ctx.config.config_file else None,
        "explicit": explicit is not None,
        "profile": resolver.resolve_profile(),
        "search_paths": [] if explicit else [str(p) for p in resolver.search_paths()],
    }
    if cli_ctx.load_error is not None:
        data["error"] = str(cli_ctx.load_error)
    cli_ctx.emit(data)


@cfg.command("set")
@click.argument("key")
@click.argument("value")
@click.pass_context
@cli_command("cfg-set")
def cfg_set_cmd(ctx: click.Context, key: str, value: str) -> None:
    """Store KEY=VALUE in the profile's config file.

    The file is created (as YAML) when it does not exist yet. Replacing
    an existing value asks for confirmation unless --confirm is given.
    """
    cli_ctx = get_context(ctx)
    path = _resolver(ctx).profile_file()

    existing: Dict[str, Any] = {}
    if path.exists():
        existing = flatten_keys(read_config_file(path))

    current = existing.get(key.lower())
    changed = current is not None and _as_text(current) != value
    if changed and not cli_ctx.config.get_bool("confirm"):
        if not cli_ctx.interactive:
            raise CommandError(
                f'key "{key}" already set in {path}',
                hint="Pass --confirm to overwrite it.",
            )
        click.confirm(f'Overwrite "{key}" in {path}?', abort=True, err=True)

    write_config_value(path, key, value)
    logger.info("Config value written", key=key, path=str(path))

    cli_ctx.emit({"key": key, "value": _redacted(key, value), "config_file": str(path)})
