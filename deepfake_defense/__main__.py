"""Allow ``python -m deepfake_defense``."""

import sys

from deepfake_defense.main import main

sys.exit(main())
