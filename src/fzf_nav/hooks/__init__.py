"""Shell hook entry points."""
