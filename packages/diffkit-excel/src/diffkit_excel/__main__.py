"""Allow ``python -m diffkit_excel OLD NEW``."""

import sys

from diffkit_excel.cli import main

sys.exit(main())
