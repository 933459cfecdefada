"""Entry point for running presubmit-gate as a module.

Allows running the application with:
    python -m presubmit_gate

This delegates to the Typer CLI app.
"""

from presubmit_gate.cli import app

if __name__ == "__main__":
    app()
