"""
Platform-independent interfaces and data types.
"""
