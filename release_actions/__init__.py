"""Release Actions - CI automation for release branches.

Merges bot-authored changes forward across a chain of release branches and
expands a Dependabot template into per-branch update entries.
"""

__version__ = "0.1.0"
