"""
ChestTracker memory core.

Remembers the last-known contents of every container a player has opened,
keyed by world session, dimension and block position, and answers
"which chest had diamonds" without reopening anything.
"""

__version__ = "1.0.0"
