"""Allow ``python -m ioblate``."""

import sys

from ioblate.cli import main

if __name__ == "__main__":
    sys.exit(main())
