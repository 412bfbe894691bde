"""
TorBox Resolver
Availability checking and direct-link resolution on TorBox
"""
__version__ = "2.0.0"
