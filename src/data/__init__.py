"""
Data loading, column contracts and the clean analysis table.

Handles reading the raw spreadsheet, validating its headers, and building the
clean table (renamed, selected and derived columns) consumed by reporting.
"""
