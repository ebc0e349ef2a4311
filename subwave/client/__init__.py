"""
Client Module

Presentation-side helpers for consuming transcript updates.
"""

from .transcript import TranscriptView

__all__ = ["TranscriptView"]
