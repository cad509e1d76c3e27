"""Storage layer.

This package addresses mappings by key fingerprint and persists them
as sharded file pairs under a single store root.
"""
