"""Entry point for running spacemichael from a source checkout."""

import sys
from spacemichael.main import main


if __name__ == "__main__":
    sys.exit(main())
