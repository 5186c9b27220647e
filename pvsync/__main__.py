import sys

from pvsync.main import main

if __name__ == "__main__":
    sys.exit(main())
