"""Module entrypoint for ``python -m lazychanges``."""

from .cli import main


if __name__ == "__main__":
    main()
