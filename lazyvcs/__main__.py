"""Module entrypoint for ``python -m lazyvcs``."""

from .cli import main


if __name__ == "__main__":
    main()
