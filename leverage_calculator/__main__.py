"""Allow ``python -m leverage_calculator``."""

import sys

from .cli import main


sys.exit(main())
