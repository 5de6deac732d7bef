"""Shared registries — host route table and root workspace manifest patching."""
