"""Split the calendar page into candidate race fragments.

The page markup is not stable, so segmentation runs a chain of strategies
and keeps the output of the first one that finds anything:

1. marker cells: a highlighted cell opens every race
2. structural rows: table rows whose first cell holds a bold "dd/mm"
3. flat text: no usable table, every line starting with "dd/mm" opens a race

Fragments without a recognizable date never leave this module.
"""
import logging
import re

from scrapy.selector import Selector

from .fragments import RawFragment, selector_lines, selector_text
from .rules import ANCHOR_DATE_PATTERN, DATE_PATTERN, LEADING_DATE_PATTERN

logger = logging.getLogger(__name__)

DEFAULT_MARKER_COLORS = ('#ffff00', '#ffff99', 'yellow')
DEFAULT_FLAT_TEXT_MAX_LINES = 12
FLAT_TEXT_LINES_RANGE = (6, 20)

# Rows of nested layout tables are skipped, only leaf rows describe races
LEAF_ROWS_XPATH = '//tr[not(.//table)]'

STYLE_COLOR = re.compile(r'background(?:-color)?\s*:\s*([^;]+)', re.IGNORECASE)


def to_selector(document):
    """Wrap the raw document in a Selector.

    Returns None for a blank document. Raises TypeError when the document
    is not text at all.
    """
    if isinstance(document, bytes):
        document = document.decode('utf-8', errors='replace')
    if not isinstance(document, str):
        raise TypeError(f"Calendar document must be str or bytes, got {type(document).__name__}")
    if not document.strip():
        return None
    return Selector(text=document)


def normalize_color(value):
    return (value or '').strip().lower().replace(' ', '')


def first_date_line(lines):
    for line in lines:
        if DATE_PATTERN.search(line):
            return line
    return None


def row_starts_with_date(row):
    """True when the first cell of the row opens with a dd/mm token."""
    first_cell = row.xpath('./td[1]|./th[1]')
    if not first_cell:
        return False
    lines = selector_lines(first_cell[0])
    return bool(lines) and bool(LEADING_DATE_PATTERN.match(lines[0]))


class SegmentationStrategy:
    """One way of cutting the page into fragments."""

    name = None

    def fragments(self, selector):
        """Yield RawFragment objects in document order."""
        raise NotImplementedError


class MarkerCellStrategy(SegmentationStrategy):
    """Highlighted cells mark the first row of every race."""

    name = 'marker-cell'

    def __init__(self, colors=DEFAULT_MARKER_COLORS):
        self.colors = {normalize_color(c) for c in colors}

    def cell_color(self, cell):
        color = cell.attrib.get('bgcolor')
        if not color:
            match = STYLE_COLOR.search(cell.attrib.get('style') or '')
            color = match.group(1) if match else None
        return normalize_color(color)

    def is_marked(self, row):
        return any(self.cell_color(cell) in self.colors for cell in row.xpath('./td|./th'))

    def build(self, rows):
        anchor_row = rows[0]
        marked = [c for c in anchor_row.xpath('./td|./th') if self.cell_color(c) in self.colors]
        anchor_text = first_date_line(selector_lines(marked[0])) if marked else None
        if anchor_text is None:
            anchor_text = first_date_line(selector_lines(anchor_row))
        return RawFragment.from_rows(rows, anchor_text)

    def fragments(self, selector):
        current = None
        for row in selector.xpath(LEAF_ROWS_XPATH):
            if self.is_marked(row):
                if current:
                    yield self.build(current)
                current = [row]
            elif current is not None:
                if row_starts_with_date(row):
                    yield self.build(current)
                    current = None
                else:
                    current.append(row)
        if current:
            yield self.build(current)


class StructuralRowStrategy(SegmentationStrategy):
    """Rows with three or more cells and a bold date in the first one."""

    name = 'structural-row'
    min_cells = 3

    def anchor_text(self, row):
        cells = row.xpath('./td')
        if len(cells) < self.min_cells:
            return None
        for bold in cells[0].xpath('.//b|.//strong'):
            text = selector_text(bold)
            if ANCHOR_DATE_PATTERN.match(text):
                return text
        return None

    def fragments(self, selector):
        rows = selector.xpath(LEAF_ROWS_XPATH)
        for index, row in enumerate(rows):
            anchor_text = self.anchor_text(row)
            if anchor_text is None:
                continue
            group = [row]
            # Details often spill into the next row
            if index + 1 < len(rows):
                next_row = rows[index + 1]
                if self.anchor_text(next_row) is None and not row_starts_with_date(next_row):
                    group.append(next_row)
            yield RawFragment.from_rows(group, anchor_text)


class FlatTextStrategy(SegmentationStrategy):
    """Plain text fallback: a date line plus the lines that follow it.

    Without usable markup the source newlines are the only line breaks left,
    so they are kept.
    """

    name = 'flat-text'

    def __init__(self, max_lines=DEFAULT_FLAT_TEXT_MAX_LINES):
        low, high = FLAT_TEXT_LINES_RANGE
        if not low <= max_lines <= high:
            raise ValueError(f"Flat text window must be between {low} and {high} lines, got {max_lines}")
        self.max_lines = max_lines

    def fragments(self, selector):
        body = selector.xpath('//body') or [selector]
        lines = selector_lines(body[0], preserve_newlines=True)
        starts = [i for i, line in enumerate(lines) if LEADING_DATE_PATTERN.match(line)]
        for position, start in enumerate(starts):
            end = starts[position + 1] if position + 1 < len(starts) else len(lines)
            end = min(end, start + self.max_lines)
            chunk = lines[start:end]
            yield RawFragment.from_lines(chunk, chunk[0])


def default_strategies(marker_colors=DEFAULT_MARKER_COLORS, flat_text_max_lines=DEFAULT_FLAT_TEXT_MAX_LINES):
    return [
        MarkerCellStrategy(marker_colors),
        StructuralRowStrategy(),
        FlatTextStrategy(flat_text_max_lines),
    ]


class DocumentSegmenter:
    """Restartable, lazy sequence of fragments for one document.

    Every iteration walks the strategy chain again; the first strategy that
    yields at least one dated fragment is the only one used.
    """

    def __init__(self, document, strategies=None):
        self.selector = to_selector(document)
        self.strategies = strategies if strategies is not None else default_strategies()

    def __iter__(self):
        if self.selector is None:
            return
        for strategy in self.strategies:
            found = 0
            for fragment in strategy.fragments(self.selector):
                if not fragment.anchor_text:
                    logger.debug(f"Dropping undated fragment from {strategy.name}: {fragment!r}")
                    continue
                found += 1
                yield fragment
            if found:
                logger.debug(f"Segmentation strategy '{strategy.name}' produced {found} fragments")
                return
        logger.info("No race fragments found in the calendar document")
