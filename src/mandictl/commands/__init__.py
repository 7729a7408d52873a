"""Subcommand modules for mandictl.

Provides register_commands() which uses deferred imports to keep
``mandictl --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all command groups and standalone commands on the root CLI group."""
    # --- Groups ---
    from mandictl.commands.translate import cache
    from mandictl.commands.txn import txn

    cli.add_command(cache)
    cli.add_command(txn)

    # --- Standalone commands ---
    from mandictl.commands.negotiate import compromise, negotiate, stalled, tips
    from mandictl.commands.price import price, suggest
    from mandictl.commands.translate import translate

    cli.add_command(price)
    cli.add_command(suggest)
    cli.add_command(negotiate)
    cli.add_command(compromise)
    cli.add_command(stalled)
    cli.add_command(tips)
    cli.add_command(translate)
