"""Front matter and link checks."""
