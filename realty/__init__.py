"""
Realty Catalogue API: public property catalogue with session favorites and an admin back office.
"""

__version__ = "1.0.0"
