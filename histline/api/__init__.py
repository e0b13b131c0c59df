"""
HTTP API package for Histline.
"""
