"""Allow ``python -m absurdio``."""

import sys

from .cli import main

sys.exit(main())
