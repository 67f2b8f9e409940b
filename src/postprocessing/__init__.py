"""Post-processing subsystem - text comparison helpers for transcript merging."""
from src.postprocessing.TextNormalizer import TextNormalizer

__all__ = ['TextNormalizer']
