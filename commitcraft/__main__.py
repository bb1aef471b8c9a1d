import sys

from commitcraft.cli import main

sys.exit(main())
