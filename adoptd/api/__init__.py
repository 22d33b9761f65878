"""
HTTP surface of the plant doctor backend.
"""
