"""End-to-end tests of the calendar parser on the fixture documents."""

import logging

import pytest
from scrapy.settings import Settings

from race_scraping.items import AttachmentsItem, RaceItem
from race_scraping.parsing import CalendarParser, parse_calendar
from race_scraping.parsing.extractor import FieldExtractor


def titles(races):
    return [race['title'] for race in races]


class TestStructuralDocument:
    def test_valid_rows_become_races(self, structural_html, today):
        races = parse_calendar(structural_html, today)
        assert titles(races) == ["Corsa di Primavera", "Trail del Castello"]
        assert [race['id'] for race in races] == [1, 2]

    def test_first_race_fields(self, structural_html, today):
        race = parse_calendar(structural_html, today)[0]
        assert isinstance(race, RaceItem)
        assert race['date'] == "2024-10-04"
        assert race['time'] == "19:30"
        assert race['province_code'] == "RE"
        assert race['province'] == "Reggio Emilia"
        assert race['venue'] == "Via Roma 12, Scandiano"
        assert race['location'] == "Scandiano"
        assert race['distances'] == [12, 19, 29]
        assert race['price'] == "15€"
        assert race['type'] == "Corsa su strada"
        assert race['is_competitive'] is False
        assert race['organizer'] == "ASD Podisti Scandiano"
        assert race['email_address'] == "info@podisti.it"
        assert race['phone_number'] == "333 1234567"
        assert "Ristoro finale" in race['description']

    def test_first_race_attachments(self, structural_html, today):
        attachments = parse_calendar(structural_html, today)[0]['attachments']
        assert isinstance(attachments, AttachmentsItem)
        assert attachments['has_attachment1'] is True
        assert attachments['has_registration'] is True
        assert attachments['registration_url'] == "https://www.endu.net/it/events/corsa-di-primavera"
        assert attachments['attachment_urls'] == ["https://www.reggiocorre.it/allegato/locandina.pdf"]

    def test_second_race_fields(self, structural_html, today):
        race = parse_calendar(structural_html, today)[1]
        assert race['date'] == "2024-12-31"
        assert race['province'] == "Parma"
        assert race['location'] == "Langhirano"
        assert race['distances'] == [2.5, 6.5, 12, 21]
        assert race['type'] == "Trail"
        assert race['price'] == "Gratuito"

    def test_source_wrapped_cells(self, today):
        html = """<table><tr>
          <td><b>4/10</b>
            Venerdì
            RE</td>
          <td>19:30</td>
          <td><div><b>Corsa di Natale</b></div>Via Roma 1,
            Scandiano<br>Percorso unico 10 km</td>
        </tr></table>"""
        race = parse_calendar(html, today)[0]
        assert race['title'] == "Corsa di Natale"
        assert race['venue'] == "Via Roma 1, Scandiano"
        assert race['location'] == "Scandiano"
        assert race['province_code'] == "RE"
        assert race['description'] == "Percorso unico 10 km"

    def test_parsing_is_idempotent(self, structural_html, today):
        parser = CalendarParser()
        first = [dict(race) for race in parser.parse(structural_html, today)]
        second = [dict(race) for race in parser.parse(structural_html, today)]
        assert first == second


class TestFallbackDocuments:
    def test_marker_cells(self, marker_html, today):
        races = parse_calendar(marker_html, today)
        assert titles(races) == ["Maratonina di Correggio", "Camminata tra i colli di Rubiera"]
        first, second = races
        assert first['venue'] == "Corso Mazzini 3, Correggio"
        assert first['province_code'] == "RE"
        assert first['distances'] == [7, 21]
        assert first['price'] == "10€"
        assert second['venue'] == "Rubiera"
        assert second['type'] == "Camminata"
        assert second['price'] == "Gratuito"

    def test_flat_text(self, flat_html, today):
        races = parse_calendar(flat_html, today)
        assert titles(races) == ["Corsa podistica del Donatore AVIS", "Camminata serale per le vie del centro"]
        first, second = races
        assert first['date'] == "2024-10-04"
        assert first['time'] == "09:00"
        assert first['location'] == "Rubiera"
        assert first['distances'] == [5, 10]
        assert second['location'] == "Modena"
        assert second['province'] == "Modena"


class TestEdgeCases:
    def test_empty_document(self, today):
        assert parse_calendar("", today) == []
        assert parse_calendar("<html><body>Nessuna gara in programma</body></html>", today) == []

    def test_non_text_document(self, today):
        with pytest.raises(TypeError):
            parse_calendar(None, today)

    def test_unknown_province(self, today):
        html = "<div>4/10\nCorsa in collina sui sentieri\n10 km</div>"
        race = parse_calendar(html, today)[0]
        assert race['province_code'] == "XY"
        assert race['province'] == "Fuori Provincia"
        assert race['location'] == "N/D"

    def test_description_is_truncated(self, structural_html, today):
        race = parse_calendar(structural_html, today, description_max_length=20)[0]
        assert race['description'] == "Percorsi 12-19-29 km"
        # Rules still see the whole description
        assert race['distances'] == [12, 19, 29]

    def test_failing_fragment_does_not_abort_batch(self, structural_html, today, caplog):
        class FlakyExtractor(FieldExtractor):
            def extract(self, fragment, today=None):
                if fragment.anchor_text == "4/10":
                    raise RuntimeError("boom")
                return super().extract(fragment, today)

        parser = CalendarParser()
        parser.extractor = FlakyExtractor()
        with caplog.at_level(logging.ERROR):
            races = parser.parse(structural_html, today)
        assert titles(races) == ["Trail del Castello"]
        assert races[0]['id'] == 1
        assert "boom" in caplog.text

    def test_invalid_options(self):
        with pytest.raises(ValueError):
            CalendarParser(year_policy='sometimes')
        with pytest.raises(ValueError):
            CalendarParser(flat_text_max_lines=50)


class TestFromSettings:
    def test_reads_project_settings(self, marker_html, today):
        settings = Settings({
            'CALENDAR_BASE_URL': 'https://example.org/',
            'YEAR_POLICY': 'rollover',
            'DESCRIPTION_MAX_LENGTH': 100,
            'MARKER_CELL_COLORS': ['#ffff99'],
            'FLAT_TEXT_MAX_LINES': 8,
        })
        parser = CalendarParser.from_settings(settings)
        assert parser.extractor.base_url == 'https://example.org/'
        assert parser.extractor.year_policy == 'rollover'
        assert parser.description_max_length == 100
        assert parser.flat_text_max_lines == 8
        # Only the first race uses the configured color
        assert titles(parser.parse(marker_html, today)) == ["Maratonina di Correggio"]

    def test_defaults(self):
        parser = CalendarParser.from_settings(Settings())
        assert parser.extractor.year_policy == 'current'
        assert parser.marker_colors == ('#ffff00', '#ffff99', 'yellow')
