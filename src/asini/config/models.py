"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, asini.toml only contains overrides.
An empty (or missing) asini.toml is a valid configuration.
"""

from __future__ import annotations

from pydantic import BaseModel, field_validator

# --- asini.toml sections ---


class GitConfig(BaseModel):
    """[git] section."""

    model_config = {"frozen": True}

    executable: str = "git"
    remote: str = "origin"


class NpmConfig(BaseModel):
    """[npm] section.

    ``backup_suffix`` names the manifest backup written during installs:
    ``package.json.<backup_suffix>_backup``.
    """

    model_config = {"frozen": True}

    executable: str = "npm"
    backup_suffix: str = "asini"

    @field_validator("backup_suffix")
    @classmethod
    def _no_separators(cls, value: str) -> str:
        if not value or "/" in value or "\\" in value:
            msg = f"backup_suffix must be a bare filename fragment, got {value!r}"
            raise ValueError(msg)
        return value
