"""
Statistical analysis and synthetic datasets.

Includes the simple linear regression (OLS) and Pearson correlation used to
quantify the GDP / CO2 relationship, plus generators for known-answer data.
"""
