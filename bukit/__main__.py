"""
Entry point for running bu as a module.

Usage: python -m bukit [command] [options]
"""

from bukit.cli.parser import main

if __name__ == "__main__":
    main()
