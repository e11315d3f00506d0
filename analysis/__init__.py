"""
analysis package marker.
"""
