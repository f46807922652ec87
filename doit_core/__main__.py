import sys

from doit_core.cli import main

sys.exit(main())
