"""
Localized, human-readable scope descriptions.
"""
