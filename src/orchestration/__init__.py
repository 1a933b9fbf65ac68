"""
End-to-end analysis pipeline.

Coordinates loading, cleaning, chart rendering and statistics in a single
linear run.
"""
