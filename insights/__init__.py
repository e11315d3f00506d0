"""
insights package marker.
"""
