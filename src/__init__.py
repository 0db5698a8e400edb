# src/__init__.py — v1
"""imganalyzer: vision LLM image question answering."""

from imganalyzer.version import __version__

__all__ = ["__version__"]
