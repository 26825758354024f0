# Define your item pipelines here
#
# Don't forget to add your pipeline to the ITEM_PIPELINES setting
# See: https://docs.scrapy.org/en/latest/topics/item-pipeline.html
import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from zoneinfo import ZoneInfo

from .envelope import (
    DEFAULT_WINDOW_DAYS,
    failure_envelope,
    filter_upcoming,
    serialize_item,
    success_envelope,
)
from .items import DiagnosticsItem, RaceItem
from .spiders.base_spider import DEFAULT_TIMEZONE

logger = logging.getLogger(__name__)


class RaceEnvelopePipeline:
    """Collect the races of a run and write the response envelope on close.

    Debug runs write the DiagnosticsItem instead. A run whose spider recorded
    an error (download failure, unexpected parse error) writes a failure
    envelope.
    """

    def __init__(self, output_file, window_days=DEFAULT_WINDOW_DAYS, timezone_name=DEFAULT_TIMEZONE):
        self.output_file = output_file
        self.window_days = window_days
        self.timezone = ZoneInfo(timezone_name)
        self.races = []
        self.diagnostics = None

    @classmethod
    def from_crawler(cls, crawler):
        settings = crawler.settings
        return cls(
            output_file=settings.get('ENVELOPE_FILE', 'reggiocorre.json'),
            window_days=settings.getint('RACE_WINDOW_DAYS', DEFAULT_WINDOW_DAYS),
            timezone_name=settings.get('CALENDAR_TIMEZONE', DEFAULT_TIMEZONE),
        )

    def open_spider(self, spider):
        self.races = []
        self.diagnostics = None

    def process_item(self, item, spider):
        if isinstance(item, DiagnosticsItem):
            self.diagnostics = item
        elif isinstance(item, RaceItem):
            self.races.append(item)
        return item

    def build_payload(self, spider):
        if self.diagnostics is not None:
            return serialize_item(self.diagnostics)

        error = getattr(spider, 'error', None)
        if error is not None:
            return failure_envelope(error)
        if not getattr(spider, 'fetched', False):
            return failure_envelope("Calendar page was not fetched")

        now = getattr(spider, 'started_at', None) or datetime.now(timezone.utc)
        # The window starts on the local calendar date of the run
        upcoming = filter_upcoming(self.races, now.astimezone(self.timezone), self.window_days)
        logger.info(f"{len(upcoming)} of {len(self.races)} races within {self.window_days} days")
        return success_envelope(upcoming, len(self.races), now)

    def close_spider(self, spider):
        payload = self.build_payload(spider)
        path = Path(self.output_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(payload, f, ensure_ascii=False, indent=2)
        logger.info(f"Envelope written to {path}")
