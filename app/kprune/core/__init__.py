"""Core pipeline: liveness collection, classification and deletion policy.

Submodules are imported directly (``kprune.core.engine``,
``kprune.core.liveness``) to keep model imports free of cycles.
"""
