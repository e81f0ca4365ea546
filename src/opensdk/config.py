"""
Layered configuration for opensdk.

Values are resolved from four layers (highest priority first):
1. Flags given explicitly on the command line
2. Environment variables (OPENSDK_<FLAG_NAME>, bound by the scanner)
3. Config file (<config-dir>/<profile>.<ext> or an explicit path)
4. Defaults (including the default value of every unchanged flag)

Environment variables:
- OPENSDK_CONFIG_FILE: Explicit config file path (--config-file wins)
- OPENSDK_PROFILE: Profile name, used as the config file stem (--profile wins)
- XDG_CONFIG_HOME: Base directory for the per-user config directory
- OPENSDK_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR)
- OPENSDK_LOG_FORMAT: Log output format (text, json)

Supported config file formats: JSON, TOML and YAML.
"""

import json
import logging
import os
from dataclasses import dataclass, field
from importlib.metadata import version as get_package_version, PackageNotFoundError
from pathlib import Path
from types import MappingProxyType
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional

import click
import yaml

try:
    import tomllib
except ImportError:
    import tomli as tomllib  # Python < 3.11 fallback

from opensdk.errors import ConfigError, ConfigFileNotFoundError, ConfigLoadError


logger = logging.getLogger(__name__)

APP_NAME = "opensdk"
DEFAULT_PROFILE = "main"
ENV_CONFIG_FILE = "OPENSDK_CONFIG_FILE"
ENV_CONFIG_HOME = "XDG_CONFIG_HOME"
ENV_PROFILE = "OPENSDK_PROFILE"
SYSTEM_CONFIG_DIR = Path("/etc/opensdk")

# Search order for <profile>.<ext> within each config directory
SUPPORTED_EXTENSIONS = ("json", "toml", "yaml", "yml")

DEFAULTS: Dict[str, Any] = {
    "log-format": "text",
    "log-level": "WARNING",
}


def _get_version() -> str:
    """Get package version from metadata (single source of truth: pyproject.toml)."""
    try:
        return get_package_version("opensdk")
    except PackageNotFoundError:
        return "0.1.0"  # Fallback for dev without install


_PACKAGE_VERSION = _get_version()


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in {"true", "1", "yes", "on"}


def _normalize_key(key: str) -> str:
    return key.strip().lower()


def flatten_keys(data: Mapping[str, Any], prefix: str = "") -> Dict[str, Any]:
    """Flatten nested mappings into dotted, lowercased keys."""
    flat: Dict[str, Any] = {}
    for key, value in data.items():
        name = _normalize_key(f"{prefix}{key}")
        if isinstance(value, Mapping) and value:
            flat.update(flatten_keys(value, prefix=f"{name}."))
        else:
            flat[name] = value
    return flat


# Config file codecs


def _read_json(handle: Any) -> Any:
    return json.load(handle)


def _read_toml(handle: Any) -> Any:
    return tomllib.loads(handle.read())


def _read_yaml(handle: Any) -> Any:
    return yaml.safe_load(handle)


_READERS: Dict[str, Callable[[Any], Any]] = {
    "json": _read_json,
    "toml": _read_toml,
    "yaml": _read_yaml,
    "yml": _read_yaml,
}

_PARSE_ERRORS = (json.JSONDecodeError, tomllib.TOMLDecodeError, yaml.YAMLError)


def config_type(path: Path) -> str:
    """Return the config format for a path, based on its extension."""
    ext = path.suffix.lstrip(".").lower()
    if ext not in _READERS:
        raise ConfigLoadError(path, f'unsupported config type "{ext or path.name}"')
    return ext


def read_config_file(path: Path) -> Dict[str, Any]:
    """Read a config file into a (nested) dictionary.

    Args:
        path: File to read; the format is taken from its extension.

    Returns:
        Parsed contents. An empty file yields an empty dict.

    Raises:
        ConfigFileNotFoundError: If the file does not exist.
        ConfigLoadError: If the file cannot be read or parsed, or its
            top level is not a mapping.
    """
    reader = _READERS[config_type(path)]
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = reader(f)
    except FileNotFoundError:
        raise ConfigFileNotFoundError(path.name, [path.parent])
    except _PARSE_ERRORS as e:
        raise ConfigLoadError(path, str(e)) from e
    except OSError as e:
        raise ConfigLoadError(path, e.strerror or str(e)) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigLoadError(path, "top level must be a mapping")
    return data


def write_config_value(path: Path, key: str, value: Any) -> None:
    """Set ``key`` in the config file at ``path``, creating it if needed.

    Dotted keys are written as nested mappings. New files without a known
    extension are not accepted; TOML files are read-only.

    Raises:
        ConfigError: If the file format cannot be written.
        ConfigLoadError: If an existing file cannot be parsed.
    """
    fmt = config_type(path)
    if fmt == "toml":
        raise ConfigError(
            f"cannot write {path}: TOML config files are read-only",
            hint="Use a .yaml or .json config file to store values.",
        )

    data: Dict[str, Any] = {}
    if path.exists():
        data = read_config_file(path)

    node = data
    parts = _normalize_key(key).split(".")
    for part in parts[:-1]:
        child = node.get(part)
        if not isinstance(child, dict):
            child = {}
            node[part] = child
        node = child
    node[parts[-1]] = value

    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        if fmt == "json":
            json.dump(data, f, indent=2)
            f.write("\n")
        else:
            yaml.safe_dump(data, f, sort_keys=False)
    logger.info(f"Wrote {key} to {path}")


class ResolvedConfig(Mapping[str, Any]):
    """Immutable snapshot of the merged configuration.

    Produced once by :meth:`ConfigStore.resolve` after flags have been
    bound; command handlers only ever read from it.
    """

    def __init__(
        self,
        values: Mapping[str, Any],
        sources: Mapping[str, str],
        config_file: Optional[Path] = None,
    ):
        self._values = MappingProxyType(dict(values))
        self._sources = MappingProxyType(dict(sources))
        self.config_file = config_file

    def __getitem__(self, key: str) -> Any:
        return self._values[_normalize_key(key)]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and _normalize_key(key) in self._values

    def source(self, key: str) -> Optional[str]:
        """Name of the layer that supplied ``key`` (flag, env, file, default)."""
        return self._sources.get(_normalize_key(key))

    def get_string(self, key: str, default: str = "") -> str:
        value = self.get(key)
        if value is None:
            return default
        return str(value)

    def get_bool(self, key: str, default: bool = False) -> bool:
        value = self.get(key)
        if value is None:
            return default
        return _parse_bool(value)

    def get_int(self, key: str, default: int = 0) -> int:
        value = self.get(key)
        if value is None or value == "":
            return default
        try:
            return int(value)
        except (TypeError, ValueError) as e:
            raise ConfigError(f'key "{key}" has non-integer value "{value}"') from e

    def to_dict(self) -> Dict[str, Any]:
        """Plain dictionary copy, sorted by key."""
        return {key: self._values[key] for key in sorted(self._values)}


class ConfigStore:
    """Mutable, per-invocation configuration store.

    Holds the four layers (defaults, file, environment bindings, flags)
    and the config file search settings. Reads always consult the layers
    in priority order, so the order in which layers are populated does
    not matter.

    Example:
        >>> store = ConfigStore(environ={"OPENSDK_ACCOUNT": "42"})
        >>> store.bind_env("account", "OPENSDK_ACCOUNT")
        >>> store.get("account")
        '42'
    """

    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        """Initialize an empty store.

        Args:
            environ: Environment used for env bindings. Defaults to a
                copy of ``os.environ`` taken now.
        """
        self.environ: Dict[str, str] = dict(os.environ if environ is None else environ)
        self._defaults: Dict[str, Any] = {}
        self._file: Dict[str, Any] = {}
        self._env_bindings: Dict[str, str] = {}
        self._flags: Dict[str, Any] = {}

        self._config_file: Optional[Path] = None
        self._config_paths: List[Path] = []
        self._config_name: Optional[str] = None
        self.config_file_used: Optional[Path] = None

    # Layer registration

    def set_default(self, key: str, value: Any) -> None:
        self._defaults[_normalize_key(key)] = value

    def bind_env(self, key: str, env_name: str) -> None:
        """Resolve ``key`` from environment variable ``env_name``."""
        self._env_bindings[_normalize_key(key)] = env_name

    def set_flag(self, key: str, value: Any) -> None:
        """Record a value given explicitly on the command line."""
        self._flags[_normalize_key(key)] = value

    @property
    def env_bindings(self) -> Mapping[str, str]:
        return MappingProxyType(self._env_bindings)

    # Config file search settings

    def set_config_file(self, path: Path) -> None:
        """Use an explicit config file, bypassing directory search."""
        self._config_file = Path(path).expanduser()

    def add_config_path(self, directory: Path) -> None:
        directory = Path(directory).expanduser()
        if directory not in self._config_paths:
            self._config_paths.append(directory)

    def set_config_name(self, name: str) -> None:
        self._config_name = name

    @property
    def config_paths(self) -> List[Path]:
        return list(self._config_paths)

    @property
    def config_name(self) -> Optional[str]:
        return self._config_name

    def find_config_file(self) -> Path:
        """Locate the config file to load.

        Returns:
            The explicit config file if one was set, else the first
            ``<dir>/<name>.<ext>`` that exists.

        Raises:
            ConfigFileNotFoundError: If nothing could be located.
        """
        if self._config_file is not None:
            return self._config_file

        name = self._config_name or DEFAULT_PROFILE
        for directory in self._config_paths:
            for ext in SUPPORTED_EXTENSIONS:
                candidate = directory / f"{name}.{ext}"
                if candidate.is_file():
                    return candidate

        raise ConfigFileNotFoundError(name, self._config_paths)

    def read_in_config(self) -> Path:
        """Load the located config file into the file layer.

        Returns:
            The path that was loaded.

        Raises:
            ConfigFileNotFoundError: If no config file exists.
            ConfigLoadError: If the file exists but cannot be loaded.
        """
        path = self.find_config_file()
        data = read_config_file(path)
        self._file = flatten_keys(data)
        self.config_file_used = path
        logger.debug(f"Loaded config file {path} ({len(self._file)} keys)")
        return path

    # Reads

    def _lookup(self, key: str) -> tuple:
        if key in self._flags:
            return self._flags[key], "flag"

        env_name = self._env_bindings.get(key)
        if env_name:
            value = self.environ.get(env_name)
            if value:
                return value, "env"

        if key in self._file:
            return self._file[key], "file"

        if key in self._defaults:
            return self._defaults[key], "default"

        return None, None

    def get(self, key: str, default: Any = None) -> Any:
        value, source = self._lookup(_normalize_key(key))
        if source is None:
            return default
        return value

    def is_set(self, key: str) -> bool:
        return self._lookup(_normalize_key(key))[1] is not None

    def keys(self) -> List[str]:
        known = set(self._defaults) | set(self._file) | set(self._flags)
        known |= {k for k, env in self._env_bindings.items() if self.environ.get(env)}
        return sorted(known)

    def resolve(self) -> ResolvedConfig:
        """Freeze the merged layers into a :class:`ResolvedConfig`."""
        values: Dict[str, Any] = {}
        sources: Dict[str, str] = {}
        for key in self.keys():
            value, source = self._lookup(key)
            values[key] = value
            sources[key] = source
        return ResolvedConfig(values, sources, config_file=self.config_file_used)


@dataclass
class ConfigResolver:
    """Decides which config file a run loads and loads it into a store.

    File path priority:
    1. Explicit --config-file option
    2. OPENSDK_CONFIG_FILE (only if 1 is empty)
    3. Search <config-dir>/<profile>.<ext>, then /etc/opensdk/<profile>.<ext>

    Profile priority: --profile, then OPENSDK_PROFILE, then "main".
    """

    config_file: Optional[str] = None
    profile: Optional[str] = None
    environ: Mapping[str, str] = field(default_factory=lambda: dict(os.environ))

    def resolve_file(self) -> Optional[Path]:
        """Explicit config file for this run, if any."""
        if self.config_file:
            return Path(self.config_file).expanduser()
        if path := self.environ.get(ENV_CONFIG_FILE):
            return Path(path).expanduser()
        return None

    def resolve_dir(self) -> Path:
        """Per-user config directory for the application."""
        if home := self.environ.get(ENV_CONFIG_HOME):
            return Path(home).expanduser() / APP_NAME
        return Path(click.get_app_dir(APP_NAME))

    def resolve_profile(self) -> str:
        if self.profile:
            return self.profile
        return self.environ.get(ENV_PROFILE) or DEFAULT_PROFILE

    def search_paths(self) -> List[Path]:
        return [self.resolve_dir(), SYSTEM_CONFIG_DIR]

    def profile_file(self) -> Path:
        """Where the current profile's config file lives or would be created.

        The first existing ``<profile>.<ext>`` in the search path wins;
        otherwise ``<config-dir>/<profile>.yaml``.
        """
        explicit = self.resolve_file()
        if explicit is not None:
            return explicit
        store = ConfigStore(environ=self.environ)
        self.configure(store)
        try:
            return store.find_config_file()
        except ConfigFileNotFoundError:
            return self.resolve_dir() / f"{self.resolve_profile()}.yaml"

    def configure(self, store: ConfigStore) -> None:
        """Register the config file or the search location with ``store``."""
        explicit = self.resolve_file()
        if explicit is not None:
            store.set_config_file(explicit)
            return

        for directory in self.search_paths():
            store.add_config_path(directory)
        store.set_config_name(self.resolve_profile())

    def load(self, store: ConfigStore) -> Optional[Path]:
        """Configure ``store`` and read the config file into it.

        Returns:
            The loaded path, or None when no config file exists.

        Raises:
            ConfigLoadError: If a config file exists but cannot be loaded.
        """
        self.configure(store)
        try:
            return store.read_in_config()
        except ConfigFileNotFoundError as e:
            logger.debug(f"No config file loaded: {e}")
            return None


def package_version() -> str:
    return _PACKAGE_VERSION
