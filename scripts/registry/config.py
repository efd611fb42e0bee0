"""Configuration loading and validation for the registry builder."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

from scripts.registry.errors import ConfigError


DEFAULT_CONFIG_PATH = "registry.yaml"

DEFAULT_PACKAGES = [
    "react-hook-form",
    "zod",
    "better-auth",
    "lucide-react",
    "class-variance-authority",
    "clsx",
    "tailwind-merge",
    "sonner",
]


@dataclass
class DependencyConfig:
    """Recognition table for dependency extraction."""

    packages: list[str] = field(default_factory=lambda: list(DEFAULT_PACKAGES))
    scoped_prefixes: list[str] = field(default_factory=lambda: ["@radix-ui/"])
    aliases: dict[str, str] = field(
        default_factory=lambda: {"@hookform/resolvers/zod": "@hookform/resolvers"}
    )
    utility_marker: str = "cn("
    utility_token: str = "utils"


@dataclass
class RegistryConfig:
    """Complete registry build configuration."""

    version: str = "1.0"
    source_dir: str = "src"
    source_subdirs: list[str] = field(
        default_factory=lambda: ["components", "hooks", "lib", "types"]
    )
    extensions: list[str] = field(default_factory=lambda: [".ts", ".tsx"])
    registry_dir: str = "registry"
    catalog_file: str = "registry.json"
    product_name: str = "better-auth-ui"
    dependencies: DependencyConfig = field(default_factory=DependencyConfig)


def get_default_config() -> RegistryConfig:
    """Return the default registry configuration."""
    return RegistryConfig()


def _require_str_list(value: Any, key: str, config_file: Optional[str]) -> list[str]:
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigError(f"'{key}' must be a list of strings", file=config_file)
    return value


def _require_str(value: Any, key: str, config_file: Optional[str]) -> str:
    if not isinstance(value, str) or not value:
        raise ConfigError(f"'{key}' must be a non-empty string", file=config_file)
    return value


def _parse_dependencies(
    deps_dict: dict[str, Any], config_file: Optional[str] = None
) -> DependencyConfig:
    """Parse the dependency recognition table."""
    if not isinstance(deps_dict, dict):
        raise ConfigError("'dependencies' must be a mapping", file=config_file)

    defaults = DependencyConfig()
    aliases = deps_dict.get("aliases", defaults.aliases)
    if not isinstance(aliases, dict) or not all(
        isinstance(k, str) and isinstance(v, str) for k, v in aliases.items()
    ):
        raise ConfigError(
            "'dependencies.aliases' must map specifiers to package names",
            file=config_file,
        )

    return DependencyConfig(
        packages=_require_str_list(
            deps_dict.get("packages", defaults.packages), "dependencies.packages", config_file
        ),
        scoped_prefixes=_require_str_list(
            deps_dict.get("scoped_prefixes", defaults.scoped_prefixes),
            "dependencies.scoped_prefixes",
            config_file,
        ),
        aliases=aliases,
        utility_marker=_require_str(
            deps_dict.get("utility_marker", defaults.utility_marker),
            "dependencies.utility_marker",
            config_file,
        ),
        utility_token=_require_str(
            deps_dict.get("utility_token", defaults.utility_token),
            "dependencies.utility_token",
            config_file,
        ),
    )


def validate_config(config: RegistryConfig, config_file: Optional[str] = None) -> None:
    """Validate configuration values.

    Raises:
        ConfigError: If configuration is invalid.
    """
    if not config.extensions:
        raise ConfigError("'extensions' must not be empty", file=config_file)

    for ext in config.extensions:
        if not ext.startswith(".") or len(ext) < 2:
            raise ConfigError(
                f"Invalid extension '{ext}': must start with '.'",
                file=config_file,
            )

    for subdir in config.source_subdirs:
        if Path(subdir).is_absolute() or ".." in Path(subdir).parts:
            raise ConfigError(
                f"Invalid source subdirectory '{subdir}': must be relative to source_dir",
                file=config_file,
            )

    for prefix in config.dependencies.scoped_prefixes:
        if not prefix.endswith("/"):
            raise ConfigError(
                f"Invalid scoped prefix '{prefix}': must end with '/'",
                file=config_file,
            )


def load_config(config_path: Path | str) -> RegistryConfig:
    """Load configuration from a YAML file.

    Args:
        config_path: Path to the registry.yaml file.

    Returns:
        RegistryConfig with loaded values merged with defaults.

    Raises:
        ConfigError: If the file exists but contains invalid configuration.
    """
    config_path = Path(config_path)
    config_file = str(config_path)

    defaults = get_default_config()

    if not config_path.exists():
        return defaults

    try:
        content = config_path.read_text(encoding="utf-8")
        if not content.strip():
            return defaults

        data = yaml.safe_load(content)
        if not data:
            return defaults
        if not isinstance(data, dict):
            raise ConfigError(
                "Top-level registry config must be a mapping",
                file=config_file,
            )

    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML: {e}", file=config_file)
    except OSError as e:
        raise ConfigError(f"Cannot read config: {e}", file=config_file)

    config = RegistryConfig(
        version=str(data.get("version", defaults.version)),
        source_dir=_require_str(data.get("source_dir", defaults.source_dir), "source_dir", config_file),
        source_subdirs=_require_str_list(
            data.get("source_subdirs", defaults.source_subdirs), "source_subdirs", config_file
        ),
        extensions=_require_str_list(
            data.get("extensions", defaults.extensions), "extensions", config_file
        ),
        registry_dir=_require_str(
            data.get("registry_dir", defaults.registry_dir), "registry_dir", config_file
        ),
        catalog_file=_require_str(
            data.get("catalog_file", defaults.catalog_file), "catalog_file", config_file
        ),
        product_name=_require_str(
            data.get("product_name", defaults.product_name), "product_name", config_file
        ),
        dependencies=_parse_dependencies(data.get("dependencies") or {}, config_file),
    )

    validate_config(config, config_file)

    return config
