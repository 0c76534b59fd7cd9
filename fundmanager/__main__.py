import sys

from fundmanager.cli import main

sys.exit(main())
