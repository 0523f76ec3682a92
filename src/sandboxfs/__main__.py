"""Allow ``python -m sandboxfs``."""

from sandboxfs.cli import app

if __name__ == "__main__":
    app()
