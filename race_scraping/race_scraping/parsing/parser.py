"""Calendar page -> ordered list of RaceItem.

The parser is a pure function of the document, the processing date and its
options: no I/O and no state kept between calls.
"""
import logging
from datetime import date

from ..exceptions import FieldExtractionError, FragmentRejected
from ..items import RaceItem
from . import rules
from .extractor import DEFAULT_BASE_URL, FieldExtractor
from .segmenter import (
    DEFAULT_FLAT_TEXT_MAX_LINES,
    DEFAULT_MARKER_COLORS,
    DocumentSegmenter,
    default_strategies,
)

logger = logging.getLogger(__name__)


def province_name(code):
    return rules.PROVINCES.get(code, rules.OUT_OF_AREA)


def truncate(text, max_length):
    return (text or '')[:max_length].strip()


class CalendarParser:
    """Extract validated races from the calendar document.

    Args:
        base_url (str): origin for relative attachment links
        year_policy (str): 'current' keeps the processing year, 'rollover'
            moves already-past dates to next year
        description_max_length (int): description truncation length
        marker_colors (iterable): highlight colors opening a race row
        flat_text_max_lines (int): lines per fragment in the flat text fallback
    """

    def __init__(self, base_url=DEFAULT_BASE_URL, year_policy='current',
                 description_max_length=rules.DESCRIPTION_MAX_LENGTH,
                 marker_colors=DEFAULT_MARKER_COLORS,
                 flat_text_max_lines=DEFAULT_FLAT_TEXT_MAX_LINES):
        self.extractor = FieldExtractor(base_url=base_url, year_policy=year_policy)
        self.description_max_length = description_max_length
        self.marker_colors = tuple(marker_colors)
        self.flat_text_max_lines = flat_text_max_lines
        # Validate the strategy options up front
        default_strategies(self.marker_colors, self.flat_text_max_lines)

    @classmethod
    def from_settings(cls, settings):
        """Build a parser from Scrapy settings."""
        return cls(
            base_url=settings.get('CALENDAR_BASE_URL', DEFAULT_BASE_URL),
            year_policy=settings.get('YEAR_POLICY', 'current'),
            description_max_length=settings.getint('DESCRIPTION_MAX_LENGTH', rules.DESCRIPTION_MAX_LENGTH),
            marker_colors=settings.getlist('MARKER_CELL_COLORS', list(DEFAULT_MARKER_COLORS)),
            flat_text_max_lines=settings.getint('FLAT_TEXT_MAX_LINES', DEFAULT_FLAT_TEXT_MAX_LINES),
        )

    def segment(self, document):
        return DocumentSegmenter(
            document,
            default_strategies(self.marker_colors, self.flat_text_max_lines),
        )

    def build_race(self, race_id, fields):
        fields = dict(fields)
        fields['description'] = truncate(fields['description'], self.description_max_length)
        fields['province'] = province_name(fields['province_code'])
        return RaceItem(id=race_id, **fields)

    def parse(self, document, today=None):
        """Parse a calendar document.

        Fragment-level problems never abort the batch: rejected fragments are
        skipped, unexpected errors are logged and the fragment is skipped.

        Args:
            document (str|bytes): raw calendar markup
            today (datetime.date): processing date, defaults to today

        Returns:
            list: RaceItem objects with ids 1..n in fragment-discovery order

        Raises:
            TypeError: if the document is not text
        """
        today = today or date.today()
        races = []
        fragments = 0
        rejected = 0
        for fragment in self.segment(document):
            fragments += 1
            try:
                fields = self.extractor.extract(fragment, today)
            except FragmentRejected as e:
                rejected += 1
                logger.debug(f"Fragment rejected ({e.reason}): {e.anchor_text!r}")
                continue
            except Exception as e:
                error = FieldExtractionError(f"Error parsing fragment: {e}", fragment.anchor_text)
                logger.error(f"{error} | Context: anchor={fragment.anchor_text!r}", exc_info=True)
                rejected += 1
                continue
            races.append(self.build_race(len(races) + 1, fields))

        logger.info(f"Parsed {len(races)} races from {fragments} fragments ({rejected} skipped)")
        return races


def parse_calendar(document, today=None, **options):
    """Shortcut for `CalendarParser(**options).parse(document, today)`."""
    return CalendarParser(**options).parse(document, today)
