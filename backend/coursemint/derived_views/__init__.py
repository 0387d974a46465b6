"""Derived views: read-only, recomputed per request from a fresh snapshot.

Nothing in a derived view is stored; the UI reads these instead of stitching
together raw progress rows itself.
"""
