"""Common literal values used across platform_docs.

These constants keep route segment names, filenames, and commit metadata
centralized so the resolver, the manifest builder, the reference job, and the
tests import the same values without drifting.

Examples
--------
>>> from platform_docs import _constants
>>> _constants.PLATFORM_SEGMENT
'[platform]'
>>> _constants.PULL_REQUEST_TITLE_TEMPLATE.format(branch="update-ref-1", base="main")
'Merge update-ref-1 into main'
"""

PLATFORM_PARAM = "platform"
PLATFORM_SEGMENT = f"[{PLATFORM_PARAM}]"
PAGE_FILENAME = "index.mdx"

REFERENCE_COMMIT_MESSAGE = "updating references"
PULL_REQUEST_TITLE_TEMPLATE = "Merge {branch} into {base}"
PULL_REQUEST_BODY = "Created by Github action"
