"""
CLI 진입점

실행 방법:
    python -m capital --help
"""

import sys

from capital.cli import entrypoint

if __name__ == "__main__":
    sys.exit(entrypoint())
