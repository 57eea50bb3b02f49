"""MCP server exposing the Kaggle public API as tools."""

__version__ = "0.1.0"
