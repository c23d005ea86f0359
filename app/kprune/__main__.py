"""Allow running kprune as ``python -m kprune``."""

from kprune.cli.main import app

app(prog_name="kprune")
