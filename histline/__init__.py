"""
Histline - historical topic search with generated, cached timelines.
"""

__version__ = "0.1.0"
