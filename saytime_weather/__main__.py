"""Allow running as ``python -m saytime_weather``."""

import sys

from saytime_weather.cli import main

sys.exit(main())
