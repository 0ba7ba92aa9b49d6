"""
fieldcheck Hooks Package
========================

Extension points for verdict consumers.
"""

from fieldcheck.plugins.hooks import Hook, HookCallback, HookHandler, HookPriority

__all__ = [
    "Hook",
    "HookCallback",
    "HookHandler",
    "HookPriority",
]
