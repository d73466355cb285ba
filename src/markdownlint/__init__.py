"""markdownlint - front matter and link checks for Markdown trees."""

__version__ = "0.1.0"
