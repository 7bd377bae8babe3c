"""Allow `python -m termfolio`."""

from termfolio.cli import app

app()
