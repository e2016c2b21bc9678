from .errors import ClubNLQError, DataStoreError, ErrorCode, ExtractionError
from .interfaces import DataStore, EntityExtractor
from .streaks import TemporalStreakEngine

__all__ = [
    'ClubNLQError',
    'DataStoreError',
    'ErrorCode',
    'ExtractionError',
    'DataStore',
    'EntityExtractor',
    'TemporalStreakEngine',
]
