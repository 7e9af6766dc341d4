"""Main function for n24clock."""

from n24clock.core import cli


def run_main() -> None:
    """Main entry point to n24clock."""
    cli.app()


if __name__ == "__main__":
    cli.app()
