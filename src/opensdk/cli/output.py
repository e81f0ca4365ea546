"""Output helpers for the opensdk CLI.

Every command writes its result through :func:`emit`, which renders the
payload in the format chosen with ``--format``:

- ``json``: minified JSON, one document per command
- ``yaml``: block-style YAML
- ``text``: ``key: value`` lines
- ``table``: a Rich table (one row per record, or KEY/VALUE rows)
"""

import io
import json
from pathlib import Path
from typing import IO, Any, Dict, List, Mapping, Optional, Sequence

import click
import yaml
from rich.console import Console
from rich.table import Table
from rich.text import Text

OUTPUT_JSON = "json"
OUTPUT_TABLE = "table"
OUTPUT_TEXT = "text"
OUTPUT_YAML = "yaml"

OUTPUT_FORMATS = (OUTPUT_JSON, OUTPUT_TABLE, OUTPUT_TEXT, OUTPUT_YAML)

_TABLE_WIDTH = 160


def _scalar(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list, tuple)):
        return json.dumps(value, separators=(",", ":"), default=str)
    return str(value)


def _records(data: Any) -> List[Mapping[str, Any]]:
    if isinstance(data, Mapping):
        return [data]
    if isinstance(data, Sequence) and not isinstance(data, (str, bytes)):
        return [item if isinstance(item, Mapping) else {"value": item} for item in data]
    return [{"value": data}]


def render_json(data: Any) -> str:
    return json.dumps(data, separators=(",", ":"), default=str)


def render_yaml(data: Any) -> str:
    return yaml.safe_dump(data, sort_keys=False, default_flow_style=False).rstrip("\n")


def render_text(data: Any) -> str:
    if not isinstance(data, (Mapping, list, tuple)):
        return _scalar(data)

    blocks = []
    for record in _records(data):
        blocks.append("\n".join(f"{key}: {_scalar(value)}" for key, value in record.items()))
    return "\n\n".join(blocks)


def render_table(data: Any) -> str:
    """Render records as a Rich table.

    A single mapping becomes KEY/VALUE rows; a list of mappings becomes
    one row per item with the union of their keys as columns.
    """
    if isinstance(data, Mapping):
        table = Table(show_header=True, header_style="bold")
        table.add_column("KEY")
        table.add_column("VALUE")
        for key, value in data.items():
            table.add_row(Text(str(key)), Text(_scalar(value)))
    else:
        records = _records(data)
        columns: Dict[str, None] = {}
        for record in records:
            for key in record:
                columns.setdefault(str(key), None)

        table = Table(show_header=True, header_style="bold")
        for column in columns:
            table.add_column(column.upper())
        for record in records:
            table.add_row(*(Text(_scalar(record.get(column))) for column in columns))

    buffer = io.StringIO()
    console = Console(file=buffer, force_terminal=False, no_color=True, width=_TABLE_WIDTH)
    console.print(table)
    return buffer.getvalue().rstrip("\n")


_RENDERERS = {
    OUTPUT_JSON: render_json,
    OUTPUT_TABLE: render_table,
    OUTPUT_TEXT: render_text,
    OUTPUT_YAML: render_yaml,
}


def render(data: Any, fmt: str = OUTPUT_JSON) -> str:
    """Render ``data`` in one of :data:`OUTPUT_FORMATS`.

    Raises:
        ValueError: If ``fmt`` is not a known output format.
    """
    try:
        renderer = _RENDERERS[fmt]
    except KeyError:
        raise ValueError(f'unknown output format "{fmt}"') from None
    return renderer(data)


def emit(data: Any, fmt: str = OUTPUT_JSON, output: Optional[str] = None) -> None:
    """Write ``data`` in the requested format.

    Args:
        data: Payload to render.
        fmt: One of :data:`OUTPUT_FORMATS`.
        output: File to write instead of stdout.
    """
    text = render(data, fmt)
    if output:
        path = Path(output).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text + "\n", encoding="utf-8")
        return
    click.echo(text)


def cmd_print(stream: IO[str]) -> None:
    """Copy a text stream verbatim to stdout."""
    for chunk in iter(lambda: stream.read(8192), ""):
        click.echo(chunk, nl=False)
