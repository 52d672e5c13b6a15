"""Command-line interface for mm1-trace."""
