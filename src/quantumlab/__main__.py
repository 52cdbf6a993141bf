"""
Run with: python -m quantumlab
"""
import sys

from quantumlab.main import main

if __name__ == "__main__":
    sys.exit(main())
