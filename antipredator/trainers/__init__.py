"""
Training loops and episode lifecycle.
"""
