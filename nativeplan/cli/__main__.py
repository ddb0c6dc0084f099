"""
Entry point for running the nativeplan CLI as a module.

Usage: python -m nativeplan.cli [command] [options]
"""

from .parser import main

if __name__ == "__main__":
    main()
