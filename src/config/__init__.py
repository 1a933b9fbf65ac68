"""
Configuration loading and validation for the analysis run.

Provides a strongly typed settings object for the input spreadsheet, output
directory and display options, loaded from environment variables with upfront
validation.
"""
