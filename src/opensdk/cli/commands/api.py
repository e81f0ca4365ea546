"""Request previews shared by the API resource commands.

The resource commands do not talk to the API; they resolve everything a
request needs (URL, paging, payload) and emit it, so the configuration
layering can be inspected end to end.
"""

from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from opensdk.cli.config import CLIContext
from opensdk.errors import CommandError

API_VERSION = "v2"


def list_params(cli_ctx: CLIContext) -> Dict[str, Any]:
    """Paging and filter parameters common to list endpoints."""
    config = cli_ctx.config
    page = config.get_int("page", 1)
    per_page = config.get_int("per-page", 30)
    if page < 1:
        raise CommandError(f'flag "page" must be at least 1, got {page}')
    if per_page < 1:
        raise CommandError(f'flag "per-page" must be at least 1, got {per_page}')

    params: Dict[str, Any] = {"page": page, "per_page": per_page}
    for key in ("query", "domain"):
        if value := config.get_string(key):
            params[key] = value
    return params


def load_payload(path: str) -> Dict[str, Any]:
    """Read a JSON or YAML request payload from ``path``.

    Raises:
        CommandError: If the file is missing, unparsable or not a mapping.
    """
    payload_path = Path(path).expanduser()
    try:
        with open(payload_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except FileNotFoundError:
        raise CommandError(f"payload file not found: {payload_path}") from None
    except (OSError, yaml.YAMLError) as e:
        raise CommandError(f"cannot read payload file {payload_path}: {e}") from e

    if not isinstance(data, dict):
        raise CommandError(f"payload file {payload_path} must contain a mapping")
    return data


def request_preview(
    cli_ctx: CLIContext,
    method: str,
    path: str,
    params: Optional[Dict[str, Any]] = None,
    body: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """Describe the API request a command would send.

    The access token must be resolvable but is never included.
    """
    cli_ctx.require("access-token")
    account = cli_ctx.require("account")

    preview: Dict[str, Any] = {
        "method": method,
        "url": f"{cli_ctx.base_url()}/{API_VERSION}/{account}/{path.lstrip('/')}",
        "sandbox": cli_ctx.config.get_bool("sandbox"),
    }
    if params:
        preview["params"] = params
    if body is not None:
        preview["body"] = body
    return preview
