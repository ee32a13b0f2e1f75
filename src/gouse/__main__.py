"""Allow running gouse as ``python -m gouse``."""

from gouse.cli import app

app(prog_name="gouse")
