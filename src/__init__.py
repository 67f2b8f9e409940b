# src/__init__.py
from .TranscriptAccumulator import TranscriptAccumulator
from .controllers.SpeechController import SpeechController

__all__ = [
    'TranscriptAccumulator',
    'SpeechController',
]
