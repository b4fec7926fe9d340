"""
krlib - Keep the shared kr-library dependency in sync across monorepo components.

This package inspects every configured component's installed and pinned
version of kr-library, compares them with the latest release tag of the
library's git remote, and offers to install or upgrade where they differ.
"""

__version__ = "1.0.0"
