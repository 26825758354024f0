"""Response envelope around the parsed races.

Everything here sits outside the parser: the forward-looking date window,
the success/failure envelope, the camelCase export and the structural
diagnostics returned in debug mode.
"""
from datetime import date, datetime, timedelta, timezone

from itemadapter import ItemAdapter
from scrapy.selector import Selector

from .items import DiagnosticsItem
from .utils.common import camelize, clean_text, export_number

DEFAULT_WINDOW_DAYS = 60
SAMPLE_ROWS = 10

# Keys whose exported name does not follow plain camelCase
EXPORT_NAMES = {
    'has_gpx': 'hasGPX',
}


def export_key(key):
    return EXPORT_NAMES.get(key, camelize(key))


def export_value(value):
    if isinstance(value, dict):
        return {export_key(k): export_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [export_value(v) for v in value]
    return export_number(value)


def serialize_item(item):
    """Plain dict of an item (nested items included) with camelCase keys."""
    return export_value(ItemAdapter(item).asdict())


def race_date(race):
    value = race['date']
    if isinstance(value, date):
        return value
    return date.fromisoformat(value)


def filter_upcoming(races, now, days=DEFAULT_WINDOW_DAYS):
    """Keep races dated between `now` and `now + days`, both ends included.

    Comparison is done on calendar dates, so a race held today is kept
    whatever time of day `now` is.
    """
    start = now.date()
    end = (now + timedelta(days=days)).date()
    return [race for race in races if start <= race_date(race) <= end]


def timestamp(now):
    """ISO-8601 UTC timestamp with millisecond precision and a trailing Z."""
    return now.astimezone(timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def success_envelope(races, total_parsed, now=None):
    """Envelope for a successful run.

    Args:
        races (list): races to publish (already filtered)
        total_parsed (int): races parsed before filtering
        now (datetime): processing time

    Returns:
        dict: {success, count, totalParsed, lastUpdate, races}
    """
    now = now or datetime.now(timezone.utc)
    return {
        'success': True,
        'count': len(races),
        'totalParsed': total_parsed,
        'lastUpdate': timestamp(now),
        'races': [serialize_item(race) for race in races],
    }


def failure_envelope(error):
    return {
        'success': False,
        'error': str(error),
    }


def describe_document(html):
    """Raw structure counts of a document, for troubleshooting the parser."""
    selector = Selector(text=html or '<html/>')
    rows = selector.xpath('//tr')
    sample_rows = []
    for row in rows[:SAMPLE_ROWS]:
        first_cell = row.xpath('./td[1]')
        first_text = clean_text(' '.join(first_cell.xpath('.//text()').getall())) if first_cell else None
        inner_html = ''.join(child.get() for child in row.xpath('./node()'))
        sample_rows.append({
            'cell_count': len(row.xpath('./td')),
            'first_cell_text': first_text[:50] if first_text is not None else None,
            'inner_html': inner_html[:300],
        })
    return DiagnosticsItem(
        debug=True,
        html_length=len(html or ''),
        table_count=len(selector.xpath('//table')),
        row_count=len(rows),
        link_count=len(selector.xpath('//a')),
        image_count=len(selector.xpath('//img')),
        sample_rows=sample_rows,
    )
