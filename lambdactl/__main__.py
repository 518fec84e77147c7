"""Module entrypoint for ``python -m lambdactl``."""

from .cli import main


if __name__ == "__main__":
    main()
