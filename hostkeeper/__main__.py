"""Allow running as python -m hostkeeper."""

from hostkeeper.cli import run

run()
