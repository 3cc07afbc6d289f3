"""Clean error display for resolution failures."""

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from .errors import AmbiguousExtensionError
from .errors import CycleError
from .errors import ErrorKind
from .errors import ResolutionError

_TITLES = {
    ErrorKind.INVALID_SPECIFIER: "Invalid Specifier",
    ErrorKind.NOT_FOUND: "Module Not Found",
    ErrorKind.AMBIGUOUS_EXTENSION: "Ambiguous Extension",
    ErrorKind.DIRECT_INDEX_FORBIDDEN: "Index Required Directly",
    ErrorKind.OUT_OF_ROOT: "Outside Namespace Root",
    ErrorKind.CYCLE: "Require Cycle",
}


def display_resolution_error(console: Console, error: Exception, verbose: bool = False) -> bool:
    """Display a ResolutionError with clean Rich formatting.

    Args:
        console: Rich console for output
        error: The error to display
        verbose: If True, also print traceback

    Returns:
        True if error was handled as a resolution error, False if not (caller should handle)
    """
    if not isinstance(error, ResolutionError):
        return False

    content = Text()

    if error.specifier is not None:
        content.append("Specifier: ", style="dim")
        content.append(error.specifier, style="bold cyan")
        content.append("\n")
    if error.requester is not None:
        content.append("Required from: ", style="dim")
        content.append(str(error.requester), style="yellow")
        content.append("\n")

    content.append("\n")
    content.append(error.detail, style="white")

    if isinstance(error, AmbiguousExtensionError) and error.candidates:
        content.append("\n\n")
        content.append("── Candidates ──", style="dim")
        for candidate in error.candidates:
            content.append(f"\n  {candidate}", style="dim")

    if isinstance(error, CycleError) and error.chain:
        content.append("\n\n")
        content.append("── Chain ──", style="dim")
        for step, path in enumerate(error.chain):
            content.append(f"\n  {'└─ ' if step else ''}{path}", style="dim")

    console.print()
    console.print(
        Panel(
            content,
            title=f"[bold red]{_TITLES[error.kind]}[/bold red]",
            border_style="red",
            padding=(1, 2),
        )
    )
    console.print(f"[dim]Tip: {_get_actionable_tip(error)}[/dim]")
    console.print()

    if verbose:
        console.print("[dim]─── Traceback ───[/dim]")
        console.print_exception()

    return True


def _get_actionable_tip(error: ResolutionError) -> str:
    """Generate an actionable tip based on the error kind."""
    if error.kind is ErrorKind.AMBIGUOUS_EXTENSION:
        return "Delete or rename one of the candidate files; only one extension may exist per module."
    if error.kind is ErrorKind.DIRECT_INDEX_FORBIDDEN:
        return "Require the directory itself (or use '.' from inside it) instead of its index file."
    if error.kind is ErrorKind.OUT_OF_ROOT:
        return "Remove a '../' level; parent chains cannot leave the namespace root."
    if error.kind is ErrorKind.CYCLE:
        return "Break the cycle by moving shared code into a module both sides can require."
    if error.kind is ErrorKind.INVALID_SPECIFIER:
        return "Use './name', '../name', ':name' (from an index) or '.' (from an index)."
    return "Check the spelling; from an index module, use ':name' to reach its own children."
