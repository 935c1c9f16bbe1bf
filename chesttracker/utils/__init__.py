"""Utility helpers for ChestTracker."""
