"""Tests for the response envelope, date window and export format."""

from datetime import datetime, timedelta, timezone

from race_scraping.envelope import (
    describe_document,
    failure_envelope,
    filter_upcoming,
    serialize_item,
    success_envelope,
    timestamp,
)
from race_scraping.exceptions import SourceUnavailable
from race_scraping.items import AttachmentsItem, RaceItem
from race_scraping.parsing import parse_calendar


def make_race(race_id=1, race_date="2024-10-04", **overrides):
    fields = dict(
        id=race_id,
        date=race_date,
        time="09:00",
        title="Corsa di Primavera",
        location="Scandiano",
        province="Reggio Emilia",
        province_code="RE",
        venue="Via Roma 12, Scandiano",
        distances=[12.0, 21.1],
        description="",
        type="Corsa su strada",
        is_competitive=False,
        price="Gratuito",
        organizer=None,
        society=None,
        phone_number=None,
        email_address=None,
        attachments=AttachmentsItem(
            has_calendar=True, has_maps=False, map_link=None, has_email=False,
            email_address=None, has_website=False, website_url=None,
            has_registration=False, registration_url=None, has_gpx=True,
            has_attachment1=False, has_attachment2=False, attachment_urls=[],
        ),
    )
    fields.update(overrides)
    return RaceItem(**fields)


# ── Date window ────────────────────────────────────────────────


class TestFilterUpcoming:
    def test_window_bounds_are_inclusive(self, now):
        races = [
            make_race(1, "2024-08-31"),
            make_race(2, "2024-09-01"),
            make_race(3, "2024-10-30"),
            make_race(4, "2024-10-31"),
            make_race(5, "2024-11-01"),
        ]
        kept = filter_upcoming(races, now, days=60)
        assert [race['id'] for race in kept] == [2, 3, 4]

    def test_race_today_is_kept_late_in_the_day(self):
        late = datetime(2024, 9, 1, 23, 59, tzinfo=timezone.utc)
        assert len(filter_upcoming([make_race(1, "2024-09-01")], late)) == 1

    def test_order_is_preserved(self, now):
        races = [make_race(1, "2024-10-20"), make_race(2, "2024-09-10")]
        assert [race['id'] for race in filter_upcoming(races, now)] == [1, 2]


# ── Envelope ───────────────────────────────────────────────────


class TestEnvelope:
    def test_timestamp_format(self, now):
        assert timestamp(now) == "2024-09-01T15:30:00.000Z"

    def test_timestamp_converts_to_utc(self):
        rome = timezone(timedelta(hours=2))
        assert timestamp(datetime(2024, 9, 1, 17, 30, tzinfo=rome)) == "2024-09-01T15:30:00.000Z"

    def test_success(self, now):
        envelope = success_envelope([make_race()], 3, now)
        assert envelope['success'] is True
        assert envelope['count'] == 1
        assert envelope['totalParsed'] == 3
        assert envelope['lastUpdate'] == "2024-09-01T15:30:00.000Z"
        assert envelope['races'][0]['title'] == "Corsa di Primavera"

    def test_empty_success(self, now):
        envelope = success_envelope([], 0, now)
        assert envelope['count'] == 0
        assert envelope['races'] == []

    def test_failure(self):
        envelope = failure_envelope(SourceUnavailable("https://www.reggiocorre.it/calendario.aspx", "HTTP 503"))
        assert envelope == {
            'success': False,
            'error': "Unable to fetch https://www.reggiocorre.it/calendario.aspx: HTTP 503",
        }


class TestSerializeItem:
    def test_keys_are_camel_case(self):
        data = serialize_item(make_race())
        assert data['provinceCode'] == "RE"
        assert data['isCompetitive'] is False
        assert data['phoneNumber'] is None
        assert data['attachments']['hasCalendar'] is True
        assert data['attachments']['attachmentUrls'] == []

    def test_gpx_flag_name(self):
        attachments = serialize_item(make_race())['attachments']
        assert attachments['hasGPX'] is True
        assert 'hasGpx' not in attachments

    def test_integral_distances_are_ints(self):
        distances = serialize_item(make_race())['distances']
        assert distances == [12, 21.1]
        assert isinstance(distances[0], int)

    def test_parsed_race_round_trip(self, structural_html, today):
        data = serialize_item(parse_calendar(structural_html, today)[0])
        assert data['id'] == 1
        assert data['distances'] == [12, 19, 29]
        assert data['attachments']['registrationUrl'] == "https://www.endu.net/it/events/corsa-di-primavera"


# ── Diagnostics ────────────────────────────────────────────────


class TestDescribeDocument:
    def test_counts(self, structural_html):
        diagnostics = describe_document(structural_html)
        assert diagnostics['debug'] is True
        assert diagnostics['html_length'] == len(structural_html)
        assert diagnostics['table_count'] == 1
        assert diagnostics['row_count'] == 6
        assert diagnostics['link_count'] == 3
        assert diagnostics['image_count'] == 2

    def test_sample_rows(self, structural_html):
        sample_rows = describe_document(structural_html)['sample_rows']
        assert len(sample_rows) == 6
        assert sample_rows[0]['cell_count'] == 0
        assert sample_rows[0]['first_cell_text'] is None
        assert sample_rows[1]['cell_count'] == 4
        assert sample_rows[1]['first_cell_text'].startswith("4/10")
        assert len(sample_rows[1]['inner_html']) <= 300

    def test_sample_is_capped(self):
        html = "<table>" + "<tr><td>x</td></tr>" * 25 + "</table>"
        diagnostics = describe_document(html)
        assert diagnostics['row_count'] == 25
        assert len(diagnostics['sample_rows']) == 10

    def test_empty_document(self):
        diagnostics = describe_document("")
        assert diagnostics['html_length'] == 0
        assert diagnostics['row_count'] == 0
        assert diagnostics['sample_rows'] == []
