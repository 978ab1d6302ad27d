"""
Factory modules for creating NoteStream components.
"""

from notestream.core.factory.llm_factory import LLMFactory

__all__ = [
    "LLMFactory",
]
