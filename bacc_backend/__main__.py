import sys

from bacc_backend.server import main

sys.exit(main())
