"""
templadoc - Javadoc comments from templates, kept in sync with field docs
"""

__version__ = "0.1.0"
