"""CLI configuration context.

A :class:`CLIContext` is built once per invocation and carried on the
Click context. It owns the configuration store, runs the environment
scan, loads the config file once the global flags are parsed, and
finally freezes everything into the :class:`ResolvedConfig` that
command handlers read.
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from opensdk.cli.output import emit
from opensdk.config import (
    DEFAULTS,
    ConfigResolver,
    ConfigStore,
    ResolvedConfig,
)
from opensdk.environment import scan_environment
from opensdk.errors import CommandError, ConfigLoadError
from opensdk.naming import flag_to_env

logger = logging.getLogger(__name__)

BASE_URL_PROD = "https://api.opensdk.dev"
BASE_URL_SANDBOX = "https://sandbox.opensdk.dev"


class CLIContext:
    """CLI execution context with resolved configuration.

    Lifecycle:
    1. ``__init__``: defaults are registered and the environment scanned
    2. :meth:`load_config_file`: config file located and read
    3. flags bound into :attr:`store` by the root command
    4. :meth:`finalize`: store frozen into :attr:`config`
    """

    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        """Initialize CLI context.

        Args:
            environ: Environment to resolve from (defaults to os.environ).
        """
        self.environ: Dict[str, str] = dict(os.environ if environ is None else environ)
        self.store = ConfigStore(environ=self.environ)
        for key, value in DEFAULTS.items():
            self.store.set_default(key, value)
        self.env_bindings = scan_environment(self.store)

        self.resolver: Optional[ConfigResolver] = None
        self.load_error: Optional[ConfigLoadError] = None
        self._config: Optional[ResolvedConfig] = None

    def load_config_file(
        self,
        config_file: Optional[str] = None,
        profile: Optional[str] = None,
    ) -> Optional[Path]:
        """Locate and load the config file.

        A missing file is not an error. Any other load failure is kept in
        :attr:`load_error` and logged; startup continues without file
        values.

        Returns:
            The loaded path, or None.
        """
        self.resolver = ConfigResolver(
            config_file=config_file,
            profile=profile,
            environ=self.environ,
        )
        try:
            return self.resolver.load(self.store)
        except ConfigLoadError as e:
            self.load_error = e
            logger.info(str(e))
            return None

    def finalize(self) -> ResolvedConfig:
        """Freeze the store into the snapshot handed to commands."""
        self._config = self.store.resolve()
        return self._config

    @property
    def config(self) -> ResolvedConfig:
        if self._config is None:
            raise RuntimeError("Configuration has not been resolved yet.")
        return self._config

    @property
    def output_format(self) -> str:
        return self.config.get_string("format", "json")

    @property
    def interactive(self) -> bool:
        return not self.config.get_bool("no-interactive")

    def base_url(self) -> str:
        """API base URL: explicit ``base-url``, else prod or sandbox."""
        if url := self.config.get_string("base-url"):
            return url.rstrip("/")
        if self.config.get_bool("sandbox"):
            return BASE_URL_SANDBOX
        return BASE_URL_PROD

    def emit(self, data: Any) -> None:
        """Render ``data`` with the resolved ``format`` and ``output`` settings."""
        emit(data, self.output_format, self.config.get_string("output") or None)

    def require(self, key: str) -> Any:
        """Return a resolved value, raising if it is unset.

        Raises:
            CommandError: With a hint naming the flag and env variable.
        """
        value = self.config.get(key)
        if value is None or value == "":
            raise CommandError(
                f'required flag "{key}" not set',
                hint=f"Pass --{key} or set {flag_to_env(key)}.",
            )
        return value


def create_context(environ: Optional[Mapping[str, str]] = None) -> CLIContext:
    """Create a CLI context for one invocation."""
    return CLIContext(environ=environ)
