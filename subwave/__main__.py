import sys

from subwave.cli import main

sys.exit(main())
