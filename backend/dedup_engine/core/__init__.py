"""
Engine configuration and logging.
"""
