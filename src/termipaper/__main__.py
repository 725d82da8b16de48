import sys

from termipaper.cli import main

sys.exit(main())
