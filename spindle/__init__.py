"""Spindle static site build pipeline.

Spindle watches a source tree and transforms each changed file into an
artifact in a mirrored destination tree: ktml documents become HTML pages
built with a declarative tag tree, JavaScript and CSS are minified.

The main entry point is the CLI module, which provides commands for
building a site once and for watching it.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
