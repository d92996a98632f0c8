"""Script and stylesheet minification for Spindle.

Thin wrapper over the third-party minifiers so transforms only depend on
a single ``minify(kind, content)`` call.
"""

from __future__ import annotations

from enum import Enum

import csscompressor
from rjsmin import jsmin


class MinifyKind(Enum):
    SCRIPT = "script"
    STYLESHEET = "stylesheet"


def minify(kind: MinifyKind, content: str) -> str:
    """Minify script or stylesheet source.

    Args:
        kind: Which minifier to run.
        content: Source text.

    Returns:
        Minified text. Errors raised by the minifier propagate.
    """
    if kind is MinifyKind.SCRIPT:
        return jsmin(content)
    return csscompressor.compress(content)
