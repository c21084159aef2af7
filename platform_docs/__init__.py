"""Static route helpers and reference tooling for the platform docs site.

This package exposes the CLI entry points used by ``uv run docs`` and the
``update-references`` workflow to enumerate platform page routes, resolve
their props, and refresh the generated API reference.

Exports
-------
- ``app``: Cyclopts application entry for subcommands.
- ``main``: Convenience function that invokes the Cyclopts app.
- ``get_static_paths`` / ``resolve_props``: the platform path resolver.

Examples
--------
>>> from platform_docs import get_static_paths
>>> get_static_paths(["android"]).to_dict()
{'paths': [{'params': {'platform': 'android'}}], 'fallback': False}
"""

from __future__ import annotations

from .cli import app, main
from .paths import enumerate_paths, get_static_paths, resolve_props

__all__ = ["app", "enumerate_paths", "get_static_paths", "main", "resolve_props"]
