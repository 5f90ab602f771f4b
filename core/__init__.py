"""
Convenience package shim.

The app is organized under `app/` and is typically run via `python app/main.py`,
which puts `app/` on `sys.path` so imports like `import core.*` work.

The headless report (`python -m core.cli`) runs from the repo root, where
`app/` is not on `sys.path`. Extending the package search path to `app/core`
makes `core.*` resolve there as well.
"""

from __future__ import annotations

import os

_HERE = os.path.abspath(os.path.dirname(__file__))
_APP_CORE = os.path.normpath(os.path.join(_HERE, "..", "app", "core"))

if os.path.isdir(_APP_CORE):
    __path__.append(_APP_CORE)  # type: ignore[name-defined]
