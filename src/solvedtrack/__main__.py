"""Allow execution via ``python -m solvedtrack``."""

import sys

from solvedtrack.cli import main

if __name__ == "__main__":
    sys.exit(main())
