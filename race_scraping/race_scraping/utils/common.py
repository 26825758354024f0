"""Common utilities shared by the parser and the spiders."""
import re
from datetime import date
from urllib.parse import quote, urljoin


def clean_text(text):
    """Clean and normalize text."""
    if text is None:
        return ""
    return " ".join(text.strip().split())


def get_absolute_url(base_url, relative_url):
    """Convert relative URL to absolute URL.

    Absolute URLs are returned unchanged. Protocol-relative and root-relative
    targets are resolved against the origin of `base_url`.
    """
    if not relative_url:
        return relative_url
    relative_url = relative_url.strip()
    if relative_url.lower().startswith(('http://', 'https://')):
        return relative_url
    return urljoin(base_url, relative_url)


def unique_preserve(seq):
    """Deduplicate a sequence keeping the first occurrence of every value."""
    seen = set()
    out = []
    for x in seq:
        if x not in seen:
            seen.add(x)
            out.append(x)
    return out


def build_date(day, month, year):
    """Build a date from day/month/year strings or ints.

    Args:
        day (str|int): day of month, e.g. "4"
        month (str|int): month number, e.g. "10"
        year (int): four digit year

    Returns:
        datetime.date or None when the combination does not exist (31/02).
    """
    try:
        return date(int(year), int(month), int(day))
    except (TypeError, ValueError):
        return None


def parse_decimal(token):
    """Parse a number written with either a comma or a dot as separator.

    Returns:
        float or None if the token is not numeric.
    """
    if token is None:
        return None
    try:
        return float(token.strip().replace(',', '.'))
    except ValueError:
        return None


def export_number(value):
    """Return integral floats as int so that 12.0 is exported as 12."""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def google_maps_link(query):
    """Google Maps search URL for a free-text address."""
    return f"https://www.google.com/maps/search/?api=1&query={quote(query, safe='')}"


def camelize(key):
    """Convert a snake_case key to camelCase (`province_code` -> `provinceCode`)."""
    head, *tail = key.split('_')
    return head + ''.join(part[:1].upper() + part[1:] for part in tail)


def is_numeric_text(text):
    """True when text is only digits and numeric punctuation (dates, times, counts)."""
    return bool(re.fullmatch(r'[\d\s/:.,\-–]+', text or ''))
