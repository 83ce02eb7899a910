"""Configuration management with XDG paths, atomic writes, and precedence resolution.

This module handles everything helpspec reads or writes outside of the
translation itself:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.helpspec/`` on macOS and Windows. See :func:`get_config_dir` and
  :func:`get_data_dir`.
* **Config files** -- an optional global ``config.json`` in the config
  directory and an optional project-local ``./helpspec.json``; both hold a
  (partial) :class:`~helpspec.models.Settings` document.
* **Precedence resolution** -- :func:`resolve_settings` merges CLI flags,
  environment variables, the project file, the global file and defaults.
* **Credential resolution** -- :func:`resolve_credential` reads the service
  secret from an env var, a file, an interactive prompt or a literal.
* **Override tables** -- :func:`load_overrides` reads the
  ``objectNameOverrides`` mapping from JSON or YAML.

Every file helpspec writes goes through :func:`atomic_write`.
"""

from __future__ import annotations

import getpass
import json
import os
import platform
import sys
import tempfile
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Optional, Union

import yaml
from pydantic import ValidationError

from helpspec.exceptions import ConfigError
from helpspec.models import Settings

_APP_NAME = "helpspec"
_CONFIG_FILENAME = "config.json"
_PROJECT_CONFIG_FILENAME = "helpspec.json"

ENV_PORT = "HELPSPEC_PORT"
ENV_PORT_FALLBACK = "PORT"
ENV_SECRET_SOURCE = "HELPSPEC_SECRET_SOURCE"
ENV_OUTPUT = "HELPSPEC_OUTPUT"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from an env var with fallback segments under $HOME."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/helpspec/`` (default
    ``~/.config/helpspec/``). On macOS/Windows: ``~/.helpspec/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/helpspec/`` (default
    ``~/.local/share/helpspec/``). On macOS/Windows: ``~/.helpspec/logs/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = _fallback_base_dir() / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def atomic_write(path: Union[str, Path], data: str) -> None:
    """Write *data* to *path* atomically using a temp file + rename.

    The temporary file is created next to *path* so that ``os.replace`` is
    an atomic rename on POSIX. Missing parent directories are created. On
    any failure the temp file is removed and *path* is left untouched.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None
        os.replace(tmp_path, path)
    except BaseException:
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


# --- Config files ---


def _global_config_path() -> Path:
    return get_config_dir() / _CONFIG_FILENAME


def _read_json_object(path: Path, label: str) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigError(f"Invalid {label} at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid {label} at {path}: expected a JSON object")
    return data


def load_global_config() -> Optional[dict[str, Any]]:
    """Load the global configuration from the XDG config directory.

    Returns:
        The raw settings document, or ``None`` if the file does not exist.

    Raises:
        ConfigError: If the file is not a valid settings document.
    """
    path = _global_config_path()
    if not path.is_file():
        return None
    data = _read_json_object(path, "global config")
    _validate(data, path)
    return data


def load_project_config() -> Optional[dict[str, Any]]:
    """Load project-local configuration from ``./helpspec.json``.

    Project config sits between the global file and environment variables
    in the precedence chain; it typically pins the output path and the
    override table for a repository.

    Returns:
        The raw settings document, or ``None`` if the file does not exist.

    Raises:
        ConfigError: If the file is not a valid settings document.
    """
    path = Path.cwd() / _PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    data = _read_json_object(path, "project config")
    _validate(data, path)
    return data


def _validate(data: Mapping[str, Any], origin: Any) -> Settings:
    try:
        return Settings.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid settings in {origin}: {exc}") from exc


def _merge(base: dict[str, Any], layer: Mapping[str, Any]) -> dict[str, Any]:
    """Recursively merge *layer* over *base* (nested mappings merge, others replace)."""
    merged = dict(base)
    for key, value in layer.items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), Mapping):
            merged[key] = _merge(dict(merged[key]), value)
        else:
            merged[key] = value
    return merged


# --- Precedence resolution ---


def _env_port() -> Optional[int]:
    for var in (ENV_PORT, ENV_PORT_FALLBACK):
        raw = os.environ.get(var)
        if raw:
            try:
                return int(raw)
            except ValueError as exc:
                raise ConfigError(f"{var} must be an integer port (got {raw!r})") from exc
    return None


def resolve_settings(
    cli_port: Optional[int] = None,
    cli_secret_source: Optional[str] = None,
    cli_output: Optional[str] = None,
    cli_overrides_file: Optional[str] = None,
    cli_generator: Optional[Mapping[str, Any]] = None,
) -> Settings:
    """Resolve the effective settings with the full precedence chain.

    Precedence (high to low):
        1. CLI flags
        2. Environment variables (``HELPSPEC_PORT`` then ``PORT``,
           ``HELPSPEC_SECRET_SOURCE``, ``HELPSPEC_OUTPUT``)
        3. Project config (``./helpspec.json``)
        4. Global config (``<config_dir>/config.json``)
        5. Defaults

    Args:
        cli_port: ``--port``.
        cli_secret_source: ``--secret-source``.
        cli_output: ``--output``.
        cli_overrides_file: ``--overrides``.
        cli_generator: Further ``generator`` fields set on the command line;
            ``None`` values are ignored.

    Raises:
        ConfigError: If any layer is invalid.
    """
    data: dict[str, Any] = {}

    # 4 + 3. Files
    for layer in (load_global_config(), load_project_config()):
        if layer:
            data = _merge(data, layer)

    # 2. Environment
    env_layer: dict[str, Any] = {"service": {}, "generator": {}}
    port = _env_port()
    if port is not None:
        env_layer["service"]["port"] = port
    if os.environ.get(ENV_SECRET_SOURCE):
        env_layer["service"]["secret_source"] = os.environ[ENV_SECRET_SOURCE]
    if os.environ.get(ENV_OUTPUT):
        env_layer["generator"]["output"] = os.environ[ENV_OUTPUT]
    data = _merge(data, env_layer)

    # 1. CLI
    cli_layer: dict[str, Any] = {"service": {}, "generator": {}}
    if cli_port is not None:
        cli_layer["service"]["port"] = cli_port
    if cli_secret_source is not None:
        cli_layer["service"]["secret_source"] = cli_secret_source
    if cli_output is not None:
        cli_layer["generator"]["output"] = cli_output
    if cli_overrides_file is not None:
        cli_layer["generator"]["overrides_file"] = cli_overrides_file
    for key, value in (cli_generator or {}).items():
        if value is not None:
            cli_layer["generator"][key] = value
    data = _merge(data, cli_layer)

    return _validate(data, "resolved settings")


# --- Credential source resolution ---


def resolve_credential(source: str) -> str:
    """Resolve a credential from its source descriptor.

    Supported formats:
        - ``"env:VAR_NAME"`` -- reads ``os.environ["VAR_NAME"]``
        - ``"file:/path/to/file"`` -- reads file content, stripped of whitespace
        - ``"prompt"`` -- prompts user interactively (requires a TTY)
        - ``"value:LITERAL"`` -- the literal text after the prefix

    Raises:
        ConfigError: If the source can't be resolved.
    """
    if source.startswith("env:"):
        var_name = source[4:]
        value = os.environ.get(var_name)
        if value is None:
            raise ConfigError(
                f"Environment variable '{var_name}' is not set (source: {source})"
            )
        return value

    if source.startswith("file:"):
        path = Path(source[5:]).expanduser()
        if not path.is_file():
            raise ConfigError(f"Credential file not found: {path} (source: {source})")
        try:
            return path.read_text(encoding="utf-8").strip()
        except OSError as exc:
            raise ConfigError(f"Cannot read credential file {path}: {exc}") from exc

    if source == "prompt":
        if not sys.stdin.isatty():
            raise ConfigError(
                "Cannot prompt for credentials: stdin is not a TTY (source: prompt)"
            )
        return getpass.getpass("Enter service secret: ")

    if source.startswith("value:"):
        return source[6:]

    raise ConfigError(f"Unknown credential source format: {source}")


# --- Override tables ---


def load_overrides(path: Union[str, Path]) -> dict[str, str]:
    """Load an ``objectNameOverrides`` table from a JSON or YAML file.

    The file holds a flat mapping of raw type name to output name, either at
    the top level or under an ``objectNameOverrides`` key.

    Raises:
        ConfigError: If the file is missing, unparsable, or not a flat
            mapping of strings.
    """
    file_path = Path(path).expanduser()
    if not file_path.is_file():
        raise ConfigError(f"Overrides file not found: {file_path}")
    try:
        content = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Cannot read overrides file {file_path}: {exc}") from exc

    suffix = file_path.suffix.lower()
    hint = "yaml" if suffix in (".yaml", ".yml") else "json" if suffix == ".json" else ""
    data = _parse_content(content, hint=hint, origin=file_path)

    if "objectNameOverrides" in data and isinstance(data["objectNameOverrides"], Mapping):
        data = data["objectNameOverrides"]

    overrides: dict[str, str] = {}
    for key, value in data.items():
        if not isinstance(key, str) or not isinstance(value, str):
            raise ConfigError(
                f"Overrides in {file_path} must map names to names "
                f"(got {key!r}: {value!r})"
            )
        overrides[key] = value
    return overrides


def _parse_content(content: str, hint: str = "", origin: Any = "<string>") -> dict[str, Any]:
    """Parse content as JSON, falling back to YAML unless *hint* says JSON.

    Raises:
        ConfigError: If the content is not a mapping in either format.
    """
    json_error: Exception | None = None

    if hint != "yaml":
        try:
            result = json.loads(content)
        except json.JSONDecodeError as exc:
            if hint == "json":
                raise ConfigError(f"Invalid JSON in {origin}: {exc}") from exc
            json_error = exc
        else:
            if not isinstance(result, dict):
                raise ConfigError(
                    f"{origin} must contain an object (got {type(result).__name__})"
                )
            return result

    try:
        result = yaml.safe_load(content)
    except yaml.YAMLError as exc:
        msg = f"Failed to parse {origin} as JSON or YAML"
        if json_error:
            msg += f"\n  JSON error: {json_error}"
        msg += f"\n  YAML error: {exc}"
        raise ConfigError(msg) from exc
    if not isinstance(result, dict):
        kind = type(result).__name__ if result is not None else "empty document"
        raise ConfigError(f"{origin} must contain a mapping (got {kind})")
    return result


def effective_overrides(settings: Settings) -> dict[str, str]:
    """File overrides with the inline ``object_name_overrides`` merged on top."""
    overrides: dict[str, str] = {}
    if settings.generator.overrides_file:
        overrides.update(load_overrides(settings.generator.overrides_file))
    overrides.update(settings.generator.object_name_overrides)
    return overrides
