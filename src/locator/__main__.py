import sys

from .cli import main_cli


def main() -> None:
    """Entry point for the locator CLI."""
    sys.exit(main_cli())


if __name__ == "__main__":
    main()
