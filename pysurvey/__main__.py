import os
import sys

# Enable importing also if not installed
sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))


import pysurvey


# Special hooks exit early
if __name__ == "__main__" and len(sys.argv) >= 2:
    if sys.argv[1] in ("--version", "version"):
        print("pysurvey", pysurvey.__version__)
        sys.exit(0)


if __name__ == "__main__":
    sys.exit(pysurvey.cli())
