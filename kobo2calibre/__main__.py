import sys

from kobo2calibre.cli import main

sys.exit(main())
