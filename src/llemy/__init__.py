"""llemy: plan and implement GitHub issues with coding agents."""

__version__ = "0.1.0"
