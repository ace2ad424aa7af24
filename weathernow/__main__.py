import sys

from weathernow.cli import main

sys.exit(main())
