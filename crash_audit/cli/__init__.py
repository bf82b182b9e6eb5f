"""Command-line interface for crash audits."""
