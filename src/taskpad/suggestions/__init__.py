from .engine import DEFAULT_CORPUS, Direction, SuggestionEngine

__all__ = ["DEFAULT_CORPUS", "Direction", "SuggestionEngine"]
