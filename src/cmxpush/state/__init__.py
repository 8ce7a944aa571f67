"""State layer.

This package is the single place where validated observations are merged
into the stored per-client record.
"""
