"""Allow ``python -m skysave``."""
import sys

from .cli import main

sys.exit(main())
