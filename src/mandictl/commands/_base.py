"""Click building blocks shared by every mandictl command.

``MandiCommand``/``MandiGroup`` add an eager ``--examples`` flag so
``--help`` stays short. ``LanguageParam`` and :func:`lang_option` give
every reply-language option the same normalization and completion.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

import click
from click.shell_completion import CompletionItem

from mandictl.domain.types import LANGUAGE_NAMES

_F = TypeVar("_F", bound=Callable[..., Any])


class _ExamplesMixin:
    """Attach ``--examples`` when the command was declared with examples."""

    params: list[click.Parameter]

    def _init_examples(self, examples: str | None) -> None:
        self.examples = examples
        if not examples:
            return

        def show_examples(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
            if not value:
                return
            click.echo(f"Examples for '{ctx.command_path}':\n")
            click.echo(examples)
            ctx.exit(0)

        self.params.append(
            click.Option(
                ["--examples"],
                is_flag=True,
                expose_value=False,
                is_eager=True,
                callback=show_examples,
                help="Show usage examples.",
            )
        )


class MandiCommand(_ExamplesMixin, click.Command):
    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._init_examples(examples)


class MandiGroup(_ExamplesMixin, click.Group):
    """Group whose subcommands default to :class:`MandiCommand`."""

    command_class = MandiCommand

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._init_examples(examples)


class LanguageParam(click.ParamType):
    """Language code, trimmed and lower-cased.

    Codes outside the supported set are passed through; the services fall
    back to English for replies they cannot localize.
    """

    name = "lang"

    def convert(self, value: Any, param: click.Parameter | None, ctx: click.Context | None) -> str:
        code = str(value).strip().lower()
        if not code:
            self.fail("language code is empty", param, ctx)
        return code

    def shell_complete(
        self, ctx: click.Context, param: click.Parameter, incomplete: str
    ) -> list[CompletionItem]:
        prefix = incomplete.lower()
        return [
            CompletionItem(lang.value, help=label)
            for lang, label in LANGUAGE_NAMES.items()
            if lang.value.startswith(prefix)
        ]


LANGUAGE = LanguageParam()

LANG_OPTION_HELP = "Reply language: " + ", ".join(lang.value for lang in LANGUAGE_NAMES) + "."


def lang_option(func: _F) -> _F:
    """``--lang`` option stored as ``language``; None means the configured default."""
    return click.option("--lang", "language", type=LANGUAGE, default=None, help=LANG_OPTION_HELP)(
        func
    )
