import sys

from service_rollout.cli import main

sys.exit(main())
