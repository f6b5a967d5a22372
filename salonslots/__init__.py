"""
salonslots - appointment availability engine for the salon booking front end.
"""

__version__ = "0.1.0"
