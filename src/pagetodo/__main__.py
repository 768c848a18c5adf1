import sys

from pagetodo.interfaces.cli import main

sys.exit(main())
