"""
Addon platform: a Django host for pluggable business addons.
"""
