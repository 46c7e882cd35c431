"""Allow `python -m llemy`."""

from .main import run

run()
