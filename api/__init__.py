"""
geomany HTTP API.
"""
