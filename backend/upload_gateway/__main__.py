import sys

from upload_gateway.server import main

sys.exit(main())
