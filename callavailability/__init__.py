"""
callavailability - compute the bookable windows of a call offering.
"""

__version__ = "0.1.0"
