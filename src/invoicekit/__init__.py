"""Client core of the invoicing application.

Document numbering, the backend API client with its settings cache, and the
validated settings categories used by the settings screens.
"""

__all__ = [
    "cache",
    "cli",
    "client",
    "commands",
    "config",
    "errors",
    "formatting",
    "log",
    "numbering",
    "persistence",
    "reporting",
    "sequence",
    "settings",
    "uniqueness",
    "utils",
]
