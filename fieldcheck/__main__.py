"""
fieldcheck CLI Entry Point
==========================

Allows running fieldcheck as a module: python -m fieldcheck
"""

from fieldcheck.cli.main import main

if __name__ == "__main__":
    main()
