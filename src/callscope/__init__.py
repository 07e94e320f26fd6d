"""callscope: search and filter engine for call and SMS transcript sessions."""

__version__ = "1.0.0"
