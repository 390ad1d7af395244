"""
pixel_admin package marker.
"""
