"""
Lingua Relay

Room-based relay that translates utterances between participants.
"""

__version__ = "0.1.0"
