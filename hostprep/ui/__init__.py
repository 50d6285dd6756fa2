"""
User interfaces.
"""
