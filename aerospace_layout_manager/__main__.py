"""Entry point for running the layout manager as a module."""

from .cli.commands import cli

if __name__ == "__main__":
    cli()
