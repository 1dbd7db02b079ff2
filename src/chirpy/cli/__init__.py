"""Command-line interface for chirpy."""
