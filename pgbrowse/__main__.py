"""Entrypoint for `python -m pgbrowse`."""

from .cli import main


if __name__ == "__main__":
    main()
