"""
Kanvas editor service

Dashboard builder backend: a tree of widgets (text, image, chart, table,
divider, container) edited through a store/reducer, laid out on a snapping
grid, with table/chart widgets bound to SQL queries run by the database
collaborator scripts.
"""

__version__ = "1.0.0"
