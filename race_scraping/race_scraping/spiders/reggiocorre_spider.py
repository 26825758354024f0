import scrapy

from .base_spider import BaseSpider
from ..envelope import describe_document
from ..parsing import CalendarParser


class ReggioCorreSpider(BaseSpider):
    """Spider for https://www.reggiocorre.it/calendario.aspx

    Downloads the race calendar page and hands it, unmodified, to the
    CalendarParser. Every parsed race is yielded; the envelope pipeline
    applies the date window and writes the response file.

    Pass `-a debug=true` to skip parsing and yield the page structure counts
    instead.
    """
    name = "reggiocorre"
    site_name = "reggiocorre"
    allowed_domains = ["reggiocorre.it", "www.reggiocorre.it"]

    def __init__(self, debug=False, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.debug = str(debug).strip().lower() in ('1', 'true', 'yes')

    def start_requests(self):
        url = self.settings.get('CALENDAR_URL')
        self.logger.info(f"Fetching calendar from {url}")
        yield scrapy.Request(url, callback=self.parse, errback=self.handle_error, dont_filter=True)

    def parse(self, response):
        """Parse the calendar page into RaceItem objects."""
        self.fetched = True
        html = response.text
        self.logger.info(f"HTML length: {len(html)}")

        if self.debug:
            self.logger.info("Debug mode: returning page structure instead of races")
            yield describe_document(html)
            return

        try:
            parser = CalendarParser.from_settings(self.settings)
            races = parser.parse(html, today=self.processing_date())
        except Exception as e:
            self.log_error(f"Error parsing calendar: {e}", exc_info=True, context={'url': response.url})
            self.record_error(e)
            return

        self.logger.info(f"Found {len(races)} races")
        yield from races
