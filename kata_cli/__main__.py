import sys

from kata_cli.app import main

sys.exit(main())
