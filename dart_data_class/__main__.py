"""Allow ``python -m dart_data_class``."""

import sys

from .cli import main

sys.exit(main())
