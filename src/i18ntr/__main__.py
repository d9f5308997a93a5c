"""Allow ``python -m i18ntr``."""

import sys

from i18ntr.cli import main

sys.exit(main())
