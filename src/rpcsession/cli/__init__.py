"""
rpcsession CLI.

Usage:
    rpcsession call <method> [--handle H] [--params JSON] [--url URL]
    rpcsession watch [--url URL] [--traffic]
    rpcsession config
"""

import typer

from rpcsession.cli.main import register_commands

app = typer.Typer(help="rpcsession - talk to an engine over a stateful JSON-RPC session")


@app.callback()
def main(
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable verbose logging (DEBUG level)"
    ),
):
    """
    rpcsession - talk to an engine over a stateful JSON-RPC session.
    """
    from rpcsession.logger import setup_logging

    setup_logging(level="DEBUG" if verbose else "WARNING")


register_commands(app)

if __name__ == "__main__":
    app()
