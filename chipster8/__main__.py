import sys

from chipster8.cli import main

sys.exit(main())
