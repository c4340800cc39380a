"""
Core utilities shared across the federation package.

This package hosts:
- configuration helpers (env vars, storage paths, feature flags)
- logging setup
- password hashing and identifier generation
"""
