"""
HTTP routes exposed to the host form engine.
"""
