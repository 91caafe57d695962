import sys

from psrental.cli import main

sys.exit(main())
