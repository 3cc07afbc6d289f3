"""require-resolve - inspect require resolution against a directory tree."""

import logging
import sys
from pathlib import Path

import click
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from .error_display import display_resolution_error
from .errors import NotFoundError
from .errors import ResolutionError
from .filesystem import FileSystemNamespace
from .logging_setup import init_json_logging
from .models import CanonicalPath
from .models import GlobSuffix
from .models import ModuleKind
from .models import RequestContext
from .resolver import ModuleResolver
from .settings import load_settings

logger = logging.getLogger(__name__)

console = Console()


def _build_resolver(root: str) -> ModuleResolver:
    namespace = FileSystemNamespace(root)
    try:
        settings = load_settings(namespace.root / ".require")
    except ValidationError as e:
        console.print(f"[red]Invalid resolution settings:[/red]\n{e}")
        sys.exit(1)
    return ModuleResolver(namespace, settings)


def _root_index(resolver: ModuleResolver) -> list[CanonicalPath]:
    try:
        return [resolver.disambiguator.index_of(CanonicalPath.root()).path]
    except NotFoundError:
        return []


@click.group(invoke_without_command=True)
@click.option("--log-file", type=click.Path(dir_okay=False), default=None, help="Write JSONL logs to this file")
@click.option("--log-level", default=None, help="Log level for --log-file (default: INFO)")
@click.pass_context
def cli(ctx: click.Context, log_file: str | None, log_level: str | None):
    """Resolve module specifiers the way a loader would."""
    if log_file:
        init_json_logging(log_file, log_level)
    if ctx.invoked_subcommand is None:
        click.echo("\n" + ctx.get_help())
        ctx.exit()


@cli.command()
@click.argument("specifier")
@click.option(
    "--root", "-r", type=click.Path(exists=True, file_okay=False), default=".", help="Namespace root directory"
)
@click.option("--from", "from_module", required=True, help="Requesting module, relative to the root")
@click.option(
    "--kind",
    type=click.Choice(["auto", "leaf", "index"]),
    default="auto",
    help="Requester kind (auto: infer from the index name)",
)
@click.option("--verbose", "-v", is_flag=True, help="Show traceback on failure")
def resolve(specifier: str, root: str, from_module: str, kind: str, verbose: bool):
    """Resolve SPECIFIER as written inside --from."""
    resolver = _build_resolver(root)

    try:
        requester = CanonicalPath.parse(from_module)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--from")
    requester = resolver.provider.canonical(requester)

    if kind == "auto":
        context = resolver.context_for(requester)
    else:
        context = RequestContext(requester_path=requester, requester_kind=ModuleKind(kind))

    try:
        result = resolver.resolve(specifier, context)
    except ResolutionError as e:
        logger.warning(f"[require:cli] {e}", extra=e.log_fields())
        display_resolution_error(console, e, verbose=verbose)
        sys.exit(1)

    for path in result if isinstance(result, list) else [result]:
        click.echo(str(path))


@cli.command()
@click.option(
    "--root", "-r", type=click.Path(exists=True, file_okay=False), default=".", help="Namespace root directory"
)
@click.option("--verbose", "-v", is_flag=True, help="Show traceback on failure")
def tree(root: str, verbose: bool):
    """List every requirable module under --root."""
    resolver = _build_resolver(root)
    top = CanonicalPath.root()

    try:
        modules = _root_index(resolver) + resolver.glob_expander.expand(top, GlobSuffix.DESCENDANTS)
    except ResolutionError as e:
        display_resolution_error(console, e, verbose=verbose)
        sys.exit(1)

    table = Table(title=f"Modules under {Path(root).resolve()}", show_header=True, header_style="bold cyan")
    table.add_column("Module", style="green")
    table.add_column("Kind", style="yellow")
    for path in modules:
        module_kind = ModuleKind.INDEX if resolver.settings.is_index_entry(path.name) else ModuleKind.LEAF
        table.add_row(str(path), module_kind.value)

    console.print(table)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
