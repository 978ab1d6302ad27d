"""
NoteStream - AI-assisted notes and a simulated chat.

Streams generative-AI output into notes while the user keeps editing,
and persists mock chat threads to a key-value store.
"""

__version__ = "0.1.0"
