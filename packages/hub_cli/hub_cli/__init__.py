"""Command line tooling for notification hub descriptions."""
