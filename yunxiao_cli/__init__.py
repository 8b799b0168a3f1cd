"""
Yunxiao CLI.

- api/: Resilient request execution layer (transport, classifier, retry, fallback)
- cli/: Typer command groups built on the execution layer
- core/: Configuration, logging, exceptions
"""

__version__ = "0.1.0"
