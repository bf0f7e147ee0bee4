"""
Main entry point for running ShellSage as a module.

This allows the package to be executed directly with:
python -m shellsage
"""

from shellsage.main import app


def main() -> None:
    """Run the ShellSage CLI entrypoint."""
    app()


if __name__ == "__main__":
    main()
