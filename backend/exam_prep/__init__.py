"""Exam Prep Chat - upload study material and chat about it with an LLM."""

__version__ = "0.1.0"
