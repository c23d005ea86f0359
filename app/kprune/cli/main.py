"""Main CLI application entry point.

Defines the Typer application and global options.
"""

from typing import Annotated

import typer

from kprune import __version__
from kprune.cli.commands import prune, scan
from kprune.utils.formatting import configure_logging

# Create main Typer app
app = typer.Typer(
    name="kprune",
    help="Remove ConfigMaps and Secrets that no workload uses.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"kprune version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output.",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Suppress non-essential output.",
        ),
    ] = False,
) -> None:
    """kprune - Remove unused ConfigMaps and Secrets from a Kubernetes cluster.

    Pods in scope are scanned for references first; only objects that no
    pod references are offered for deletion.
    """
    configure_logging(verbose=verbose, quiet=quiet)

    # Store options in context for subcommands
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet


# Register commands
app.command(name="prune")(prune.prune_resources)
app.command(name="scan")(scan.scan_resources)


if __name__ == "__main__":
    app()
