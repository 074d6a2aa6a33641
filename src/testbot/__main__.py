import sys

from testbot.cli import main


sys.exit(main())
