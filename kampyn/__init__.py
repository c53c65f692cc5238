"""
KAMPYN campus food-ordering client
"""

__version__ = "1.0.0"
