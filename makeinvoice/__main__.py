"""Allow ``python -m makeinvoice``."""

import sys

from makeinvoice.cli import main

if __name__ == "__main__":  # pragma: no cover - CLI entry
    sys.exit(main())
