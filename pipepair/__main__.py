"""Allow running as ``python -m pipepair``."""

import sys

from .cli import main

sys.exit(main())
