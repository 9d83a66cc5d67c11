#!/usr/bin/env python3
"""
RBAC Generator entry point.

Usage:
  python -m rbac_generator generate [--name manager] [--input-dir ./pkg] [--output-dir ./config]
"""

import sys

from rbac_generator.libs.main_app import main


if __name__ == "__main__":
    sys.exit(main())
