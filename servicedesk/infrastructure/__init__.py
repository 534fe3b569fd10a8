"""
Infrastructure Layer
====================

MongoDB implementations of the domain repository interfaces.
"""
