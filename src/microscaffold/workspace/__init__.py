"""Filesystem helpers — template cloning, in-place text rewriting, config lookup."""
