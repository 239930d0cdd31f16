"""Modix: switch coding assistants between LLM vendors and models."""

__version__ = "0.1.0"
