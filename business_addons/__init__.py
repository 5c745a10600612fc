"""
Business addons shipped with the platform.
"""
