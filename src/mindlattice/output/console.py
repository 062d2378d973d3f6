"""Rich Console factory and theme for mindlattice output.

Consoles render into a StringIO buffer so formatting stays a pure
``ServiceResult -> str`` function. Outside a terminal (tests, pipes) Rich
drops color codes on its own.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

LATTICE_THEME = Theme(
    {
        "ml.ok": "bold green",
        "ml.error": "bold red",
        "ml.warning": "bold yellow",
        "ml.op": "bold cyan",
        "ml.key": "dim",
        "ml.id": "bold blue",
        "ml.label": "bold",
        "ml.tier": "magenta",
        "ml.recall": "green",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer."""
    return Console(
        file=StringIO(),
        theme=LATTICE_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()
