"""Allow running the updater as a module: python -m opencode_model_sync.model_updater"""

import sys
from opencode_model_sync.model_updater.cli import main

if __name__ == "__main__":
    sys.exit(main())
