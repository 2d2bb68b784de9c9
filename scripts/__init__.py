"""Command-line entry points for the leave kernel."""
