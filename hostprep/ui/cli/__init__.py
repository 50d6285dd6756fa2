"""
CLI command groups registered by ``hostprep.main``.
"""
