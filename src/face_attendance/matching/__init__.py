from .matcher import UNKNOWN, Matcher, MatchResult

__all__ = [
    'Matcher',
    'MatchResult',
    'UNKNOWN',
]
