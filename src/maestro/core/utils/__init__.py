"""Shared utilities: file I/O, settings merging and path resolution."""
