import sys

from mc_launcher.cli import main

sys.exit(main())
