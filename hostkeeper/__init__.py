"""Host maintenance and audit orchestrator."""

__version__ = "0.1.0"
