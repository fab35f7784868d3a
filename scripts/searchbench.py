#!/usr/bin/env python
"""Run searchbench commands from a source checkout."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from searchbench.cli import main


if __name__ == "__main__":
    sys.exit(main())
