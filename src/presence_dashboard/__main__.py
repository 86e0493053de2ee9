"""
Package entry point for python -m execution.

USAGE:
    python -m presence_dashboard            # Launch web dashboard
    python -m presence_dashboard dashboard  # Launch web dashboard
    python -m presence_dashboard report     # Print report
"""

import sys

from presence_dashboard.cli import main

if __name__ == "__main__":
    sys.exit(main())
