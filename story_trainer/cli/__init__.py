"""
Command line interface for story trainer.
"""
