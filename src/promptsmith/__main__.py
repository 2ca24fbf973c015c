"""Allow ``python -m promptsmith``."""
from __future__ import annotations

import sys

from promptsmith.cli._dispatcher import main

if __name__ == "__main__":
    sys.exit(main())
