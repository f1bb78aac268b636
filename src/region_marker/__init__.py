"""
Region Marker - mark image regions for masked editing.

Built with PyQt6. The operator paints brush strokes or drags rectangles
over a zoomable, pannable view of an image; the marks are exported as a
solid-colour overlay at the image's native resolution.
"""

__version__ = "1.0.0"
__author__ = "Region Marker Team"
