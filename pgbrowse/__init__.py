"""pgbrowse: an interactive PostgreSQL browser for the terminal."""

__version__ = "0.1.0"
