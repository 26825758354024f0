"""Derive race fields from one fragment.

Each output field is described by a FieldSpec: an ordered list of rules and
a default. A rule exposes `attempt(fragment, fields)` and returns either a
value or None; the first value wins. `fields` holds what has been derived so
far, so a rule may look at earlier fields but never at later ones.
"""
from collections import namedtuple
from datetime import date
from urllib.parse import urlsplit

from ..exceptions import FragmentRejected
from ..items import AttachmentsItem
from ..utils.common import (
    build_date,
    clean_text,
    get_absolute_url,
    google_maps_link,
    is_numeric_text,
    parse_decimal,
    unique_preserve,
)
from . import rules


YEAR_POLICIES = ('current', 'rollover')
DEFAULT_BASE_URL = 'https://www.reggiocorre.it/'


class Rule:
    """A single way of deriving a field value."""

    def attempt(self, fragment, fields):
        raise NotImplementedError


class PatternRule(Rule):
    """Search `pattern` in the text returned by `source`, then post-process the match."""

    def __init__(self, pattern, source, post=None):
        self.pattern = pattern
        self.source = source
        self.post = post

    def attempt(self, fragment, fields):
        text = self.source(fragment, fields)
        if not text:
            return None
        match = self.pattern.search(text)
        if not match:
            return None
        if self.post is None:
            return match.group(1)
        return self.post(match, fields)


class FunctionRule(Rule):
    """Wrap a plain `func(fragment, fields)`."""

    def __init__(self, func):
        self.func = func

    def attempt(self, fragment, fields):
        return self.func(fragment, fields)

    def __repr__(self):
        return f"<FunctionRule {self.func.__name__}>"


FieldSpec = namedtuple('FieldSpec', ['name', 'rules', 'default'])


# Text sources

def anchor_source(fragment, fields):
    return fragment.anchor_text


def fragment_source(fragment, fields):
    return fragment.text


def description_source(fragment, fields):
    return fields.get('description')


def search_text(fields):
    """Title and description, the text most rules look at."""
    return f"{fields.get('title') or ''} {fields.get('description') or ''}".strip()


# Date and time

def to_iso_date(match, fields):
    day, month = match.groups()
    reference = fields['_today']
    race_date = build_date(day, month, reference.year)
    if race_date is None:
        return None
    if fields['_year_policy'] == 'rollover' and race_date < reference:
        race_date = build_date(day, month, reference.year + 1)
        if race_date is None:
            return None
    return race_date.isoformat()


def to_clock_time(match, fields):
    hours, minutes = (int(g) for g in match.groups())
    if hours > 23 or minutes > 59:
        return None
    return f"{hours:02d}:{minutes:02d}"


# Province

def province_code_line(fragment, fields):
    for pattern in (rules.PROVINCE_CODE_LINE, rules.DATED_PROVINCE_CODE_LINE):
        for line in fragment.lines:
            match = pattern.match(line)
            if match:
                return match.group(1)
    return None


def find_place(text):
    """Return (province_code, place_name) for the gazetteer place appearing first in text.

    On a tie the longer name wins ("Reggio Emilia" over a shorter place
    starting at the same position).
    """
    if not text:
        return None, None
    best = None
    for code, place, pattern in rules.GAZETTEER_PATTERNS:
        match = pattern.search(text)
        if match:
            key = (match.start(), -len(place))
            if best is None or key < best[0]:
                best = (key, code, place)
    if best is None:
        return None, None
    return best[1], best[2]


def province_from_gazetteer(fragment, fields):
    code, _ = find_place(fragment.text)
    return code


# Title, venue, description

def strip_ordinals(text):
    return clean_text(rules.ORDINAL_PATTERN.sub(' ', text))


def accept_title(text):
    title = strip_ordinals(text)
    return title if len(title) >= 3 else None


def emphasized_title(fragment, fields):
    for text in fragment.emphasized:
        if len(text) > 5 and not is_numeric_text(text):
            title = accept_title(text)
            if title:
                return title
    return None


def longest_line_title(fragment, fields):
    candidates = [
        line for line in fragment.lines
        if len(line) > 10 and not is_numeric_text(line) and not rules.IMAGE_FILENAME.search(line)
    ]
    if not candidates:
        return None
    return accept_title(max(candidates, key=len))


def is_title_line(line, fields):
    title = fields.get('title')
    return bool(title) and (line == title or strip_ordinals(line) == title)


def address_marker_venue(fragment, fields):
    for line in fragment.lines:
        if is_title_line(line, fields):
            continue
        if rules.ADDRESS_MARKER.search(line) and len(line) <= rules.VENUE_MAX_LENGTH:
            return line
    return None


def comma_venue(fragment, fields):
    for line in fragment.lines:
        if is_title_line(line, fields):
            continue
        if ',' in line and rules.VENUE_MIN_LENGTH <= len(line) <= rules.VENUE_MAX_LENGTH:
            return line
    return None


def is_noise_line(line):
    """Lines carrying no description: dates, times, province codes, icon names."""
    if len(line) < rules.DESCRIPTION_MIN_LINE_LENGTH:
        return True
    if rules.IMAGE_FILENAME.search(line):
        return True
    # Date cell header, e.g. "4/10 Venerdì RE"
    if rules.LEADING_DATE_PATTERN.match(line):
        return True
    return is_numeric_text(line)


def description_lines(fragment, fields):
    kept = []
    venue = fields.get('venue')
    for line in fragment.lines:
        if is_title_line(line, fields) or (venue and line == venue):
            continue
        if is_noise_line(line):
            continue
        kept.append(line)
    return clean_text(' '.join(kept)) or None


# Location

def clean_segment(segment):
    segment = rules.POSTAL_CODE_PREFIX.sub('', segment.strip())
    return rules.PROVINCE_SUFFIX.sub('', segment).strip()


def plausible_location(segment):
    return (
        rules.LOCATION_MIN_LENGTH <= len(segment) <= rules.LOCATION_MAX_LENGTH
        and not segment[:1].isdigit()
    )


def venue_segment(offset):
    def venue_segment_rule(fragment, fields):
        parts = (fields.get('venue') or '').split(',')
        if len(parts) < max(2, offset + 1):
            return None
        segment = clean_segment(parts[-(offset + 1)])
        return segment if plausible_location(segment) else None
    venue_segment_rule.__name__ = f"venue_segment_{offset}"
    return venue_segment_rule


def gazetteer_location(fragment, fields):
    _, place = find_place(search_text(fields))
    return place


def capitalized_word_location(fragment, fields):
    match = rules.CAPITALIZED_WORD.search(search_text(fields))
    return match.group(1) if match else None


# Distances

def extract_distances(text):
    """Collect every distance-looking number in text.

    Returns:
        list: deduplicated floats in (0, MAX_DISTANCE), ascending
    """
    found = set()
    if not text:
        return []
    for pattern in rules.DISTANCE_PATTERNS:
        for match in pattern.finditer(text):
            for group in match.groups():
                value = parse_decimal(group)
                if value is not None and 0 < value < rules.MAX_DISTANCE:
                    found.add(value)
    return sorted(found)


def distances_rule(fragment, fields):
    return extract_distances(search_text(fields)) or None


# Classification, price, contacts

def race_type_rule(fragment, fields):
    text = search_text(fields).lower()
    for keywords, race_type in rules.RACE_TYPES:
        if any(keyword in text for keyword in keywords):
            return race_type
    return None


def competitive_rule(fragment, fields):
    text = search_text(fields).lower()
    return any(keyword in text for keyword in rules.COMPETITIVE_KEYWORDS)


def to_price(match, fields):
    return f"{match.group(1)}€"


def free_entry_rule(fragment, fields):
    text = search_text(fields).lower()
    if any(keyword in text for keyword in rules.FREE_KEYWORDS):
        return rules.FREE_PRICE
    return None


def labeled_line(pattern):
    def labeled_line_rule(fragment, fields):
        for line in fragment.lines:
            match = pattern.search(line)
            if match:
                value = match.group(1).strip(' .;:,')
                if value:
                    return value
        return None
    return labeled_line_rule


def mailto_email(fragment, fields):
    for href, _ in fragment.links:
        if href.lower().startswith('mailto:'):
            address = href[len('mailto:'):].split('?', 1)[0].strip()
            if address:
                return address
    return None


def to_phone(match, fields):
    first, second, third = match.groups()
    return f"{first} {second}{third}"


FIELD_SPECS = [
    FieldSpec('date', [PatternRule(rules.DATE_PATTERN, anchor_source, to_iso_date)], None),
    FieldSpec('time', [PatternRule(rules.TIME_PATTERN, fragment_source, to_clock_time)], rules.DEFAULT_TIME),
    FieldSpec('province_code', [
        FunctionRule(province_code_line),
        FunctionRule(province_from_gazetteer),
    ], rules.UNKNOWN_PROVINCE_CODE),
    FieldSpec('title', [FunctionRule(emphasized_title), FunctionRule(longest_line_title)], None),
    FieldSpec('venue', [FunctionRule(address_marker_venue), FunctionRule(comma_venue)], ''),
    FieldSpec('description', [FunctionRule(description_lines)], ''),
    FieldSpec('location', [
        FunctionRule(venue_segment(0)),
        FunctionRule(venue_segment(1)),
        FunctionRule(gazetteer_location),
        FunctionRule(capitalized_word_location),
    ], rules.NO_LOCATION),
    FieldSpec('distances', [FunctionRule(distances_rule)], []),
    FieldSpec('type', [FunctionRule(race_type_rule)], rules.DEFAULT_RACE_TYPE),
    FieldSpec('is_competitive', [FunctionRule(competitive_rule)], False),
    FieldSpec('price', [
        PatternRule(rules.PRICE_PATTERN, description_source, to_price),
        FunctionRule(free_entry_rule),
    ], rules.UNKNOWN_PRICE),
    FieldSpec('organizer', [FunctionRule(labeled_line(rules.ORGANIZER_PATTERN))], None),
    FieldSpec('society', [FunctionRule(labeled_line(rules.SOCIETY_PATTERN))], None),
    FieldSpec('email_address', [
        PatternRule(rules.EMAIL_PATTERN, fragment_source, lambda match, fields: match.group(0)),
        FunctionRule(mailto_email),
    ], None),
    FieldSpec('phone_number', [PatternRule(rules.PHONE_PATTERN, fragment_source, to_phone)], None),
]


def icon_filename(src):
    return urlsplit(src or '').path.rsplit('/', 1)[-1]


def classify_icon(src, alt):
    """Return the attachment kinds an icon stands for.

    Only the file name of `src` is looked at: host and directory names
    ("www.", "/web/") say nothing about the icon.
    """
    haystack = f"{icon_filename(src)} {alt}".lower()
    return [kind for kind, markers in rules.ATTACHMENT_ICONS.items()
            if any(marker in haystack for marker in markers)]


def extract_attachments(fragment, venue, email_address, base_url=DEFAULT_BASE_URL):
    """Classify the icons and links of a fragment.

    Args:
        fragment (RawFragment): the race fragment
        venue (str): derived venue, used for the maps link
        email_address (str): derived email, reported when the email icon is present
        base_url (str): origin relative links are resolved against

    Returns:
        AttachmentsItem
    """
    attachments = AttachmentsItem(
        has_calendar=True,
        has_maps=False,
        map_link=None,
        has_email=False,
        email_address=None,
        has_website=False,
        website_url=None,
        has_registration=False,
        registration_url=None,
        has_gpx=False,
        has_attachment1=False,
        has_attachment2=False,
        attachment_urls=[],
    )
    urls = []

    def absolute(href):
        return get_absolute_url(base_url, href)

    for src, alt, href in fragment.images:
        usable_href = href if href and not href.lower().startswith(('javascript:', 'mailto:', '#')) else ''
        for kind in classify_icon(src, alt):
            if kind == 'maps':
                attachments['has_maps'] = True
                if venue:
                    attachments['map_link'] = google_maps_link(venue)
            elif kind == 'email':
                attachments['has_email'] = True
                if email_address:
                    attachments['email_address'] = email_address
            elif kind == 'website':
                attachments['has_website'] = True
                if usable_href.lower().startswith('http') and not attachments['website_url']:
                    attachments['website_url'] = usable_href
            elif kind == 'registration':
                attachments['has_registration'] = True
                if usable_href.lower().startswith('http') and not attachments['registration_url']:
                    attachments['registration_url'] = usable_href
            elif kind in ('gpx', 'attachment1', 'attachment2'):
                attachments[f"has_{kind}"] = True
                if usable_href:
                    urls.append(absolute(usable_href))

    for href, text in fragment.links:
        lowered_href = href.lower()
        lowered_text = (text or '').lower()
        if not href or lowered_href.startswith(('javascript:', '#')):
            continue
        if lowered_href.startswith('mailto:'):
            attachments['has_email'] = True
            if not attachments['email_address']:
                attachments['email_address'] = email_address or href[len('mailto:'):].split('?', 1)[0]
            continue
        if ('iscri' in lowered_text
                or any(m in lowered_href for m in rules.REGISTRATION_LINK_MARKERS)):
            attachments['has_registration'] = True
            if lowered_href.startswith('http') and not attachments['registration_url']:
                attachments['registration_url'] = href
        if (any(m in lowered_text for m in rules.WEBSITE_LINK_MARKERS)
                and lowered_href.startswith('http')):
            attachments['has_website'] = True
            if not attachments['website_url']:
                attachments['website_url'] = href
        path = lowered_href.split('?', 1)[0]
        if path.endswith(rules.DOWNLOAD_EXTENSIONS):
            urls.append(absolute(href))
            if path.endswith('.gpx'):
                attachments['has_gpx'] = True

    attachments['attachment_urls'] = unique_preserve(urls)
    return attachments


class FieldExtractor:
    """Turn a RawFragment into validated race fields.

    The extractor holds configuration only; every call works on a fresh
    `fields` dict, so fragments never influence each other.
    """

    def __init__(self, base_url=DEFAULT_BASE_URL, year_policy='current', field_specs=None):
        if year_policy not in YEAR_POLICIES:
            raise ValueError(f"Unknown year policy {year_policy!r}, expected one of {YEAR_POLICIES}")
        self.base_url = base_url
        self.year_policy = year_policy
        self.field_specs = field_specs if field_specs is not None else FIELD_SPECS

    def derive(self, fragment, today):
        """Run every field spec in order and return the raw field values."""
        fields = {'_today': today, '_year_policy': self.year_policy}
        for spec in self.field_specs:
            value = None
            for rule in spec.rules:
                value = rule.attempt(fragment, fields)
                if value is not None:
                    break
            fields[spec.name] = spec.default if value is None else value
        return fields

    def validate(self, fragment, fields):
        if not fields.get('date'):
            raise FragmentRejected('no valid date', fragment.anchor_text)
        if not fields.get('title') or len(fields['title']) < 3:
            raise FragmentRejected('no title', fragment.anchor_text)
        if not fields.get('location'):
            raise FragmentRejected('no location', fragment.anchor_text)
        if not fields.get('distances'):
            raise FragmentRejected('no distances', fragment.anchor_text)

    def extract(self, fragment, today=None):
        """Derive and validate the fields of one fragment.

        Args:
            fragment (RawFragment): candidate race
            today (datetime.date): processing date, defaults to today

        Returns:
            dict: race fields (without `id`), `attachments` included

        Raises:
            FragmentRejected: when the validation gate fails
        """
        fields = self.derive(fragment, today or date.today())
        self.validate(fragment, fields)
        fields['attachments'] = extract_attachments(
            fragment, fields['venue'], fields['email_address'], self.base_url
        )
        fields['venue'] = fields['venue'] or fields['location']
        return {k: v for k, v in fields.items() if not k.startswith('_')}
