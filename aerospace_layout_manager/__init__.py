"""AeroSpace Layout Manager - declarative window layouts for AeroSpace.

This package provides:
- Layout configuration models and loader
- Display inventory and display-selector resolution
- Async wrapper around the aerospace CLI
- Multi-pass layout application engine
- Command-line interface
"""

__version__ = "1.0.0"
__license__ = "MIT"

__all__ = ["__version__", "__license__"]
