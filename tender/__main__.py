"""Entry point for ``python -m tender``."""

from tender.cli.commands import app

if __name__ == "__main__":
    app()
