"""Taskwarrior adapter for Model Context Protocol agents."""

__version__ = "0.3.0"
