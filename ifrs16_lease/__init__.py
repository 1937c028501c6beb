"""
IFRS 16 lease measurement and remeasurement engine with a Flask JSON API
"""

__version__ = "1.0.0"
