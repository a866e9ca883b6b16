"""
Terminal rendering for story trainer sessions.
"""
