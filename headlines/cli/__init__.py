"""Command-line tools for Headlines (``python -m headlines.cli``)."""
