"""
Name search over the catalog index.
"""
