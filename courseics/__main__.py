"""
Package entry point.

Allows running the application via:

    python -m courseics

This simply forwards execution to courseics.cli.main().
"""

from courseics.cli import main

if __name__ == "__main__":
    main()
