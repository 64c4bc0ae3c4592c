"""
CubeCraft services.

Cube editing, tiers, persistence, catalogs and deck export.
"""
