"""
RLS Admin module.

Command line tooling for operating on a release store.
"""
