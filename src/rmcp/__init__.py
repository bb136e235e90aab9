"""reddit-mcp: read-only Reddit access for tool-calling agents."""

__version__ = "0.1.0"
