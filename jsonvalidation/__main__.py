import sys

from jsonvalidation.cli import main

sys.exit(main())
