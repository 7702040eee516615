"""
geokit - client-side geocoding library, dood!
"""

__version__ = "0.1.0"
