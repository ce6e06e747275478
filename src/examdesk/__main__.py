"""Allow `python -m examdesk`."""

from examdesk.cli.commands import app

if __name__ == "__main__":
    app()
