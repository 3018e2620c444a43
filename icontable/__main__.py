import sys

from icontable.cli import main

sys.exit(main())
