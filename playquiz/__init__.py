"""
playquiz - timed educational quiz sessions for the terminal.
"""

__version__ = "0.1.0"
