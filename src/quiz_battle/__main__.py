"""Allow ``python -m quiz_battle``."""

import sys

from .cli import main

sys.exit(main())
