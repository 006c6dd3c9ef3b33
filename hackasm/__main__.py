import sys

from hackasm.cli import main


sys.exit(main())
