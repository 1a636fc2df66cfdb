import sys

from terminal_input.cli import main

sys.exit(main())
