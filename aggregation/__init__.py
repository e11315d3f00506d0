"""
aggregation package marker.
"""
