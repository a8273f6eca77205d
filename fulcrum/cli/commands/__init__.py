"""Command implementations for the fulcrum CLI."""
