"""Summary reporting."""
