"""
HTTP API for heightmap downloads and the map tile proxy.
"""
