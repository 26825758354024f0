"""Fragments: regions of the calendar page believed to describe one race."""
from ..utils.common import clean_text

# Elements that open and close a visual line
BLOCK_TAGS = {'br', 'p', 'div', 'li', 'tr', 'td', 'th', 'table', 'h1', 'h2', 'h3', 'h4', 'pre'}
SKIPPED_TAGS = {'script', 'style'}


def _text_chunk(text, preserve_newlines):
    if preserve_newlines:
        return text
    return text.replace('\r', ' ').replace('\n', ' ')


def _collect_chunks(element, chunks, preserve_newlines):
    # Comments and processing instructions carry no text, only a tail
    tag = element.tag if isinstance(element.tag, str) else None
    if tag is None or tag in SKIPPED_TAGS:
        return
    block = tag in BLOCK_TAGS
    preserve_newlines = preserve_newlines or tag == 'pre'
    if block:
        chunks.append('\n')
    if element.text:
        chunks.append(_text_chunk(element.text, preserve_newlines))
    for child in element:
        _collect_chunks(child, chunks, preserve_newlines)
        if child.tail:
            chunks.append(_text_chunk(child.tail, preserve_newlines))
    if block:
        chunks.append('\n')


def selector_lines(selector, preserve_newlines=False):
    """Return the visual text lines of a selector, in document order.

    Inline markup (b, i, a, span) stays on the same line; `br` and block
    elements start a new line and close it, so text following a closed
    block is a line of its own. Newlines of the markup source are plain
    whitespace unless `preserve_newlines` is set (or inside `pre`), which
    is how unstructured text dumps are read. Lines are whitespace-collapsed,
    empty lines are dropped.
    """
    root = selector.root
    if isinstance(root, str):
        chunks = [_text_chunk(root, preserve_newlines)]
    else:
        chunks = []
        _collect_chunks(root, chunks, preserve_newlines)
    lines = (clean_text(line) for line in ''.join(chunks).split('\n'))
    return [line for line in lines if line]


def selector_text(selector):
    """Whitespace-collapsed text of a selector, text nodes separated by spaces."""
    return clean_text(' '.join(selector.xpath('.//text()').getall()))


class RawFragment:
    """Opaque handle over one candidate race.

    Attributes:
        anchor_text (str): the text where the date pattern was found
        lines (tuple): visual text lines, in document order
        emphasized (tuple): texts of bold/strong elements
        images (tuple): (src, alt, parent_href) for every image
        links (tuple): (href, text) for every hyperlink
    """

    def __init__(self, anchor_text, lines, emphasized=(), images=(), links=()):
        self.anchor_text = anchor_text
        self.lines = tuple(lines)
        self.emphasized = tuple(emphasized)
        self.images = tuple(images)
        self.links = tuple(links)

    @property
    def text(self):
        return '\n'.join(self.lines)

    @classmethod
    def from_rows(cls, rows, anchor_text):
        """Build a fragment from a table row and its continuation rows."""
        lines = []
        emphasized = []
        images = []
        links = []
        for row in rows:
            for cell in row.xpath('./td|./th'):
                lines.extend(selector_lines(cell))
            for bold in row.xpath('.//b|.//strong'):
                text = selector_text(bold)
                if text:
                    emphasized.append(text)
            for img in row.xpath('.//img'):
                images.append((
                    (img.attrib.get('src') or '').strip(),
                    (img.attrib.get('alt') or '').strip(),
                    (img.xpath('ancestor::a[1]/@href').get() or '').strip(),
                ))
            for link in row.xpath('.//a[@href]'):
                links.append(((link.attrib.get('href') or '').strip(), selector_text(link)))
        return cls(anchor_text, lines, emphasized, images, links)

    @classmethod
    def from_lines(cls, lines, anchor_text):
        """Build a fragment from flattened text lines (no markup available)."""
        return cls(anchor_text, lines)

    def __repr__(self):
        return f"<RawFragment anchor={self.anchor_text!r} lines={len(self.lines)}>"
