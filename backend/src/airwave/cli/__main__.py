"""CLI entry point for airwave.cli module.

Enables execution via: python -m airwave.cli (same as airwave.cli.serve)
"""

from airwave.cli.serve import main

if __name__ == "__main__":
    main()
