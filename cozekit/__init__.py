"""Synchronous client for the Coze workflow, workflow chat and workspace APIs."""

__version__ = "0.1.0"

__all__ = ["__version__"]