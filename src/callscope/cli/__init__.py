"""Command-line interface for callscope."""
