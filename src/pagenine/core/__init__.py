"""Core domain package for pagenine.

Core contains the refresh policy, catalog matching, and notification
de-duplication without any HTTP or desktop-specific code.
"""
