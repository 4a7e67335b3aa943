"""
sentiment_advisor.reporting — terminal formatting for CLI output.

Modules:
  formatters — ASCII table formatters for Typer CLI commands.
"""
