# src/localsight/cli/main.py
"""
This module is the main entry point for the localsight CLI.
"""

import typer

from . import start

app = typer.Typer(
    name="localsight",
    help="Export kubelet storage and memory usage as Prometheus gauges.",
    add_completion=False,
)


def version_callback(value: bool):
    """
    Prints the version of localsight.
    """
    if value:
        from .. import __version__

        typer.echo(f"localsight version: {__version__}")
        raise typer.Exit()


@app.command()
def version():
    """
    Show the version of localsight.
    """
    from .. import __version__

    typer.echo(f"localsight version: {__version__}")


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show the version and exit.",
    ),
):
    """
    localsight CLI main entry point. Configuration is read from LSE_* environment variables.
    """
    pass


app.add_typer(start.app, name="start")


if __name__ == "__main__":
    app()
