"""Module entry-point for ``python -m placemacro``."""

from placemacro.cli import main

if __name__ == "__main__":
    main()
