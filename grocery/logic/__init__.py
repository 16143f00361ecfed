"""Core business logic layer.

Subpackages:
- shopping: entry parsing, duplicate handling, ordering, sections, recall and
  the list service that ties them to the repository
"""
__all__ = ["shopping"]
