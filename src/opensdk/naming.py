"""Conversion between flag names and environment variable names.

``access-token`` <-> ``OPENSDK_ACCESS_TOKEN``. Both directions share the
same contract so environment discovery and generated documentation agree
on variable names.
"""

from opensdk.errors import InvalidEnvironmentVariableError

ENV_PREFIX = "OPENSDK"


def env_prefix() -> str:
    """Prefix carried by every environment variable bound to a flag."""
    return f"{ENV_PREFIX}_"


def flag_to_env(flag: str) -> str:
    """Map a kebab-case flag name to its environment variable name.

    Example:
        >>> flag_to_env("access-token")
        'OPENSDK_ACCESS_TOKEN'
    """
    env = flag.replace("-", "_").upper()
    return f"{env_prefix()}{env}"


def env_to_flag(assignment: str) -> str:
    """Map a ``KEY=VALUE`` environment assignment to a flag name.

    The application prefix is stripped from the key when present.

    Args:
        assignment: Environment entry, e.g. ``OPENSDK_ACCESS_TOKEN=abc``.

    Returns:
        The kebab-case flag name, e.g. ``access-token``.

    Raises:
        InvalidEnvironmentVariableError: If the entry does not contain
            exactly one ``=``.
    """
    stripped = assignment
    if stripped.startswith(env_prefix()):
        stripped = stripped[len(env_prefix()):]

    parts = stripped.split("=")
    if len(parts) != 2:
        raise InvalidEnvironmentVariableError(assignment)

    return parts[0].lower().replace("_", "-")
