"""
Entry point for running the nativeplan CLI as a module.

Usage: python -m nativeplan [command] [options]
"""

from nativeplan.cli.parser import main

if __name__ == "__main__":
    main()
