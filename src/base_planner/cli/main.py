"""Base Planner CLI app and global options."""

import logging

import typer

app = typer.Typer(
    name="base-planner",
    help="Base Planner: plan grid-based base layouts from the command line.",
    no_args_is_help=True,
)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log to stderr"),
) -> None:
    """Plan files are JSON documents; every command prints JSON to stdout."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(levelname)s %(name)s: %(message)s",
        )


@app.command()
def version() -> None:
    """Show version."""
    from base_planner import __version__

    typer.echo(f"base-planner v{__version__}")
