"""Main entry point for the shelflog package."""

from shelflog.cli import app


def main():
    """Run the shelflog command-line interface."""
    app()


if __name__ == "__main__":
    main()
