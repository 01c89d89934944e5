"""Typed release configuration.

The tool works without any config file. An optional ``release.toml`` in the
project root can point at differently named files or another CMake project:

    [files]
    package_json = "package.json"
    cmake_lists = "CMakeLists.txt"
    changelog = "CHANGELOG.md"

    [cmake]
    project = "DeliVerb"
"""

from __future__ import annotations

import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_str, get_table

__all__ = [
    "CONFIG_FILE_NAME",
    "DEFAULT_CMAKE_PROJECT",
    "CMakeConfig",
    "ConfigError",
    "FilesConfig",
    "ReleaseConfig",
    "load_config",
    "load_config_or_default",
]

CONFIG_FILE_NAME = "release.toml"
DEFAULT_CMAKE_PROJECT = "DeliVerb"


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class FilesConfig:
    """Project files touched by a release, relative to the project root."""

    package_json: str = "package.json"
    cmake_lists: str = "CMakeLists.txt"
    changelog: str = "CHANGELOG.md"


@dataclass(frozen=True, slots=True)
class CMakeConfig:
    project: str = DEFAULT_CMAKE_PROJECT


@dataclass(frozen=True, slots=True)
class ReleaseConfig:
    """Main configuration container."""

    files: FilesConfig = field(default_factory=FilesConfig)
    cmake: CMakeConfig = field(default_factory=CMakeConfig)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> ReleaseConfig:
        """Create a ReleaseConfig from parsed TOML, filling in defaults."""
        files: StrDict = get_table(data, "files") or {}
        cmake: StrDict = get_table(data, "cmake") or {}
        defaults = FilesConfig()

        return cls(
            files=FilesConfig(
                package_json=get_str(files, "package_json") or defaults.package_json,
                cmake_lists=get_str(files, "cmake_lists") or defaults.cmake_lists,
                changelog=get_str(files, "changelog") or defaults.changelog,
            ),
            cmake=CMakeConfig(project=get_str(cmake, "project") or DEFAULT_CMAKE_PROJECT),
        )


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))

    data = as_str_dict(data_obj)
    if data is None:
        return Err(ConfigError("Config root must be a TOML table", path=path))
    return Ok(data)


def load_config(path: Path) -> Result[ReleaseConfig, ConfigError]:
    """Load and parse configuration from a TOML file.

    Args:
        path: Path to release.toml

    Returns:
        Ok(ReleaseConfig) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result
    return Ok(ReleaseConfig.from_dict(result.value))


def load_config_or_default(path: Path) -> Result[ReleaseConfig, ConfigError]:
    """Like load_config, but a missing file yields the default config.

    A file that exists but cannot be parsed is still an error.
    """
    if not path.exists():
        return Ok(ReleaseConfig())
    return load_config(path)
