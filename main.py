"""
MatSolver — Entry point.

Run the command-line matrix calculator.
"""

import sys

from matsolver.cli import main


if __name__ == "__main__":
    sys.exit(main())
