"""Entry point for devdust CLI."""

from devdust.cli import app


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
