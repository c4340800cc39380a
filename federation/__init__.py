"""
Persistence and domain-integrity layer for the hockey federation app.

UI screens consume the services exposed by ``federation.app_factory``; they
never touch the key-value store directly.
"""

__version__ = "1.0.0"
