"""
Convenience entry point for running freeslotwatch directly.

Usage: python -m freeslotwatch [command] [options]
"""

from .cli.app import app

if __name__ == "__main__":
    app()
