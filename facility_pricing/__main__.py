"""Allow running as: python -m facility_pricing"""

import sys

from facility_pricing.main import main

if __name__ == "__main__":
    sys.exit(main())
