"""Environment discovery for OPENSDK_* variables.

Every ``OPENSDK_<NAME>`` variable in the environment is bound to the flag
``<name>`` so the store falls back to it when no flag value is given.
The environment is treated as a noisy source: entries that do not map
cleanly are skipped without error.
"""

import logging
from typing import Dict, Mapping, Optional

from opensdk.config import ConfigStore
from opensdk.errors import InvalidEnvironmentVariableError
from opensdk.naming import env_prefix, env_to_flag

logger = logging.getLogger(__name__)


def scan_environment(
    store: ConfigStore,
    environ: Optional[Mapping[str, str]] = None,
) -> Dict[str, str]:
    """Bind every prefixed environment variable to its flag name.

    Args:
        store: Store receiving the bindings.
        environ: Environment to scan. Defaults to the store's environment.

    Returns:
        Mapping of flag name to the environment variable bound to it.
    """
    if environ is None:
        environ = store.environ

    bindings: Dict[str, str] = {}
    for name, value in environ.items():
        entry = f"{name}={value}"

        parts = entry.split("=")
        if len(parts) != 2:
            logger.debug(f"Skipping environment entry {name}: not KEY=VALUE")
            continue

        if not parts[0].startswith(env_prefix()):
            continue

        try:
            flag = env_to_flag(entry)
        except InvalidEnvironmentVariableError:
            continue

        store.bind_env(flag, parts[0])
        bindings[flag] = parts[0]

    return bindings
