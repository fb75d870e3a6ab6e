"""Local SQLite mirror of GitHub repositories, pull requests and CI checks."""

__version__ = "0.1.0"
