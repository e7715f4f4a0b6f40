"""
Service layer.

Services hold the gateway's in-process state and logic.  They know
nothing about HTTP routing so that they can be exercised directly in
tests and shared between the admin endpoints and the proxy.
"""
