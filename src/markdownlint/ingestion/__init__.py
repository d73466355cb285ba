"""File reading."""
