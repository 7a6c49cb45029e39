"""
Entry point for running bu CLI as a module.

Usage: python -m bukit.cli [command] [options]
"""

from .parser import main

if __name__ == "__main__":
    main()
