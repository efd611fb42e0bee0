"""Module entry point for running scripts.registry as a package.

Allows: python -m scripts.registry
"""

from scripts.registry.cli import main
import sys

if __name__ == '__main__':
    sys.exit(main())
