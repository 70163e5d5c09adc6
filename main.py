import sys

from slow8.host import main

if __name__ == "__main__":
    sys.exit(main())
