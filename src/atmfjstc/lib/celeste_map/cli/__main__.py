import sys

from atmfjstc.lib.celeste_map.cli import main


sys.exit(main())
