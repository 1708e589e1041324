"""
Top-level package for smart_commit.

Generates commit messages from staged changes, either with an AI
provider or with deterministic templates. The command line entry point
lives in :mod:`smart_commit.cli`.
"""

__all__ = ["__version__"]

__version__ = "0.1.0"
