#!/usr/bin/env python3
"""
Main entry point for the tirc IRC client
"""

import sys

from tirc.app import main

if __name__ == "__main__":
    sys.exit(main())
