"""
Launchpad platform implementations.
"""
