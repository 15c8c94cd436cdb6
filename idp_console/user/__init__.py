"""
Users and sessions, as seen by the console.
"""
