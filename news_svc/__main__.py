import sys

from news_svc.app_shell.cli import main

sys.exit(main())
