"""AppContext: shared Click context for all commands.

Created once by the root CLI group and passed to subcommands via
``@click.pass_obj``. Builds the assistant lazily and centralizes result
emission (stdout/stderr routing and exit codes).
"""

from __future__ import annotations

import random
from typing import TYPE_CHECKING

import click

from mandictl.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from mandictl.config.settings import MandiSettings
    from mandictl.infrastructure.kvstore import KeyValueStore
    from mandictl.services.assistant import MandiAssistant
    from mandictl.services.result import ServiceResult


def build_store(settings: MandiSettings) -> KeyValueStore:
    from mandictl.infrastructure.database.engine import init_database
    from mandictl.infrastructure.kvstore import MemoryKeyValueStore, SqliteKeyValueStore

    if settings.storage.backend == "memory":
        return MemoryKeyValueStore()
    return SqliteKeyValueStore(init_database(settings.data_dir))


def build_assistant(
    settings: MandiSettings,
    store: KeyValueStore,
    rng: random.Random | None = None,
) -> MandiAssistant:
    """Wire every service from *settings* around one key-value store."""
    from mandictl.infrastructure.backends import BackendError, get_backend
    from mandictl.services.advisor import NegotiationAdvisor
    from mandictl.services.assistant import MandiAssistant
    from mandictl.services.resolver import CommodityResolver
    from mandictl.services.transactions import TransactionLedger
    from mandictl.services.translation import TranslationCache, Translator

    tcfg = settings.translation
    try:
        backend = get_backend(tcfg.backend)
    except BackendError as exc:
        raise click.ClickException(str(exc)) from exc

    resolver = CommodityResolver(threshold=settings.resolver.threshold)
    advisor = NegotiationAdvisor(
        resolver, rng=rng, thresholds=settings.negotiation.thresholds()
    )
    cache = TranslationCache(store, max_size=tcfg.max_cache_size, slot=tcfg.cache_slot)
    translator = Translator(
        backend,
        cache,
        soft_budget_seconds=tcfg.soft_budget_seconds,
        review_threshold=tcfg.review_threshold,
    )
    return MandiAssistant(resolver, advisor, translator, TransactionLedger(store), rng=rng)


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The store and assistant are created on first use so ``--help`` and
    ``--version`` never touch the database.
    """

    def __init__(self, settings: MandiSettings, command: str | None = None) -> None:
        self.settings = settings
        self._assistant: MandiAssistant | None = None

        from mandictl.config.logging import configure_logging

        configure_logging(
            verbose=settings.verbose, log_json=settings.log_json, command=command
        )

        from mandictl.services.telemetry import disable_telemetry, enable_telemetry

        if settings.verbose:
            enable_telemetry()
        else:
            disable_telemetry()

    @property
    def assistant(self) -> MandiAssistant:
        if self._assistant is None:
            self._assistant = build_assistant(self.settings, build_store(self.settings))
        return self._assistant

    @property
    def default_language(self) -> str:
        return self.settings.negotiation.default_language

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success: writes to stdout. Warnings go to stderr so they don't
          pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
