"""Allow ``python -m sexpengine``."""

import sys

from sexpengine.cli import main

sys.exit(main())
