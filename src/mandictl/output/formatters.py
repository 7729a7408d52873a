"""Output mode selection for ServiceResult.

The CLI renders results for humans (Rich) or machines (``--json``);
``--quiet`` prints only the essential value of each result.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from mandictl.output.renderers import render_quiet, render_result

if TYPE_CHECKING:
    from mandictl.services.result import ServiceResult


@dataclass(frozen=True)
class OutputSettings:
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False


def format_result(result: ServiceResult, *, settings: OutputSettings | None = None) -> str:
    """Format a ServiceResult for display. JSON wins over quiet."""
    opts = settings or OutputSettings()
    if opts.json_output:
        return result.model_dump_json(indent=2)
    if opts.quiet:
        return render_quiet(result)
    return render_result(result, verbose=opts.verbose)
