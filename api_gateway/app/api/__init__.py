"""
API package containing the versioned admin routes and the proxy route.
"""
