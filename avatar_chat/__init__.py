"""
Avatar Chat - backend for the animated avatar chat widget.
Turns a user message into a reply, an emotion tag and optional speech audio.
"""

__version__ = "1.0.0"
