"""Run: python -m aibrain [command]"""

import sys

from aibrain.cli.main import main

sys.exit(main())
