"""
Pydantic schema definitions for admin API payloads.
"""
