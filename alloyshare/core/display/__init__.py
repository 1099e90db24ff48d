"""
UI collaborator interfaces for AlloyShare.
"""

from alloyshare.core.display.base import FeedbackSink, Renderer, TextSurface

__all__ = [
    "Renderer",
    "TextSurface",
    "FeedbackSink",
]
