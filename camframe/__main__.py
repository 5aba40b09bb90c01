import sys

from camframe.cli import main

sys.exit(main())
