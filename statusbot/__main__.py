"""
Entry point for running statusbot as a module: python -m statusbot
"""

from statusbot.cli.commands import app

if __name__ == "__main__":
    app()
