"""nvui CLI bootstrap."""

from __future__ import annotations

from nvui.cli import app

if __name__ == "__main__":
    app()
