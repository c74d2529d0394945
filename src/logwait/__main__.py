"""Allow running logwait with ``python -m logwait``."""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
