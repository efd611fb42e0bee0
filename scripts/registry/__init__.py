"""Registry builder - publishes source files into a component registry.

This package provides tools for:
- Scanning a source tree for publishable files
- Classifying files into registry categories
- Detecting third-party and shared-helper dependencies
- Merging new items into the persisted registry catalog

Usage:
    python -m scripts.registry                  # Build with defaults
    python -m scripts.registry --config FILE    # Build with a config file
"""

__version__ = "1.0.0"
