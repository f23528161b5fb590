"""
Command package.

Submodules are imported explicitly by gridcrawler.cli to avoid circular imports.
Do NOT import submodules here.
"""
__all__ = [
    "search",
    "doctor",
]
