from .extractor import FieldExtractor, extract_distances
from .fragments import RawFragment
from .parser import CalendarParser, parse_calendar
from .segmenter import DocumentSegmenter

__all__ = [
    'CalendarParser',
    'DocumentSegmenter',
    'FieldExtractor',
    'RawFragment',
    'extract_distances',
    'parse_calendar',
]
