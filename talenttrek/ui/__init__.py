"""
Presentational helpers: layout shells and landing page copy.
"""
