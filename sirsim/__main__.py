import sys

from sirsim.cli import main

sys.exit(main())
