"""
Record mappers: one per entity stored in the grid.
"""
