"""Allow ``python -m rtweekend``."""

import sys

from rtweekend.cli import main

sys.exit(main())
