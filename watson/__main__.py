import sys

from watson.cli import main

sys.exit(main())
