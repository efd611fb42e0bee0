"""Error types shared by the registry build stages."""

from __future__ import annotations

from typing import Any, Optional


class RegistryError(Exception):
    """Base error for the registry builder."""

    error_type = "registry_error"

    def __init__(
        self,
        message: str,
        file: Optional[str] = None,
        error_type: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.file = file
        if error_type:
            self.error_type = error_type

    def to_json(self) -> dict[str, Any]:
        """Serialize error to JSON format for machine parsing."""
        result: dict[str, Any] = {
            "error": self.error_type,
            "message": self.message,
        }
        if self.file:
            result["file"] = self.file
        return result

    def __str__(self) -> str:
        parts = [self.message]
        if self.file:
            parts.append(f"file: {self.file}")
        return " | ".join(parts)


class ConfigError(RegistryError):
    """Error in registry configuration."""

    error_type = "config_invalid"


class ScanError(RegistryError):
    """A source directory could not be read."""

    error_type = "scan_failed"


class CatalogLoadError(RegistryError):
    """The catalog document is missing or unparsable."""

    error_type = "catalog_load_failed"


class CatalogWriteError(RegistryError):
    """The catalog document could not be written."""

    error_type = "catalog_write_failed"


class PerFileError(RegistryError):
    """A single source file could not be read or copied."""

    error_type = "file_failed"
