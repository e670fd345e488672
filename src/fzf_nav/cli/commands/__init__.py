"""CLI command modules registered on the main app."""
