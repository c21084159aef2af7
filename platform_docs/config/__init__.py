"""Load and validate site configuration YAML for platform_docs.

This subpackage parses the project's ``site.yaml`` file, applies defaults for
the pages tree, route manifest, and reference update job, and produces typed
dataclasses (:class:`SiteConfig`, :class:`ReferencesConfig`,
:class:`GitIdentity`) consumed by the route builder and the update workflow.
The primary entry point is :func:`load_site_config`.

Examples
--------
>>> from pathlib import Path
>>> from platform_docs.config import load_site_config
>>> site = load_site_config(Path("config/site.yaml"))  # doctest: +SKIP
>>> site.pages_dir  # doctest: +SKIP
PosixPath('src/pages')
"""

from .loader import load_site_config
from .models import GitIdentity, ReferencesConfig, SiteConfig, SiteConfigError

__all__ = [
    "GitIdentity",
    "ReferencesConfig",
    "SiteConfig",
    "SiteConfigError",
    "load_site_config",
]
