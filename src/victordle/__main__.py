"""Allow ``python -m victordle``."""

import sys

from .cli import main

sys.exit(main())
