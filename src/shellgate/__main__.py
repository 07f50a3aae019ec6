"""shellgate CLI entry point."""

from shellgate.cli import app

if __name__ == "__main__":
    app()
