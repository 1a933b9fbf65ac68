"""
Chart rendering for the exploratory analysis.

Writes the time-series, faceted time-series and scatter/regression charts as
PNG files.
"""
