"""
Storage backend tests for medisave.
"""
