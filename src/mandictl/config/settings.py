"""Unified settings: CLI flags, env vars and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs   (CLI flags passed by Click)
  2. Env vars      (``MANDICTL_*`` prefix, ``__`` for nested sections)
  3. TOML file     (``mandictl.toml`` discovered via walk-up)
  4. Code defaults (baked into the section models)
"""

from __future__ import annotations

import threading
import tomllib
from pathlib import Path
from typing import Any

import click
from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from mandictl.config.discovery import find_config
from mandictl.config.models import (
    NegotiationConfig,
    ResolverConfig,
    StorageConfig,
    TranslationConfig,
)

DATA_DIRNAME = ".mandictl"


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from a discovered ``mandictl.toml``."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            raw = toml_path.read_text(encoding="utf-8")
            try:
                self._data = tomllib.loads(raw)
            except tomllib.TOMLDecodeError as exc:
                msg = f"Invalid TOML in {toml_path}: {exc}"
                raise click.ClickException(msg) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return self._data


# Thread-local storage for the TOML path during construction.
_tls = threading.local()


class MandiSettings(BaseSettings):
    """Settings for the whole mandictl CLI.

    Attributes:
        root: Directory holding ``mandictl.toml`` (or CWD if none found).
        config_path: The TOML file in use, if any.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "MANDICTL_",
        "env_nested_delimiter": "__",
    }

    root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    # --- TOML sections ---
    resolver: ResolverConfig = Field(default_factory=ResolverConfig)
    negotiation: NegotiationConfig = Field(default_factory=NegotiationConfig)
    translation: TranslationConfig = Field(default_factory=TranslationConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @property
    def data_dir(self) -> Path:
        """Where the SQLite database lives."""
        configured = self.storage.data_dir
        if configured is None:
            return self.root / DATA_DIRNAME
        return configured if configured.is_absolute() else self.root / configured

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        root: Path | None = None,
        data_dir: str | None = None,
        **cli_flags: Any,
    ) -> MandiSettings:
        """Construct settings from a CLI invocation.

        Discovers ``mandictl.toml`` via walk-up from *root* (or uses the
        explicit *config_path*) and merges CLI flags as highest-priority
        overrides. ``--data-dir`` replaces the ``[storage] data_dir`` value.
        """
        toml_path: Path | None = None
        if config_path:
            p = Path(config_path)
            if not p.is_file():
                msg = f"Config file not found: {config_path}"
                raise click.ClickException(msg)
            toml_path = p
        else:
            toml_path = find_config(root)

        if root is None:
            root = toml_path.parent.resolve() if toml_path else Path.cwd()

        _tls.toml_path = toml_path
        try:
            settings = cls(root=root, config_path=toml_path, **cli_flags)
        finally:
            _tls.toml_path = None

        if data_dir:
            storage = settings.storage.model_copy(update={"data_dir": Path(data_dir).resolve()})
            settings = settings.model_copy(update={"storage": storage})
        return settings
