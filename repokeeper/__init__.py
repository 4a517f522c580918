"""
RepoKeeper - automated maintenance for GitHub repositories.

Cleans up workflow runs, artifacts and draft releases, audits deploy keys,
and augments the resulting report with an AI assessment from whichever
configured provider is currently healthy.
"""

__version__ = "0.1.0"
