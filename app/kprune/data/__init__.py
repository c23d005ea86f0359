"""Bundled data files for kprune."""
