import sys

from vecscene.cli import main

sys.exit(main())
