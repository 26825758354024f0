"""Base spider class with common functionality for all spiders.

Child spiders should set:

- `name` (Scrapy spider name)
- `site_name` (short identifier for the site)

Download failures are logged through `handle_error` and kept on
`self.error` so that the envelope pipeline can report them.
"""
from datetime import datetime, timezone
from zoneinfo import ZoneInfo

import scrapy

from ..exceptions import SourceUnavailable

DEFAULT_TIMEZONE = 'Europe/Rome'


class BaseSpider(scrapy.Spider):
    """Base spider class with common methods and attributes.

    Attributes:
        site_name (str): short name of the source site (set in subclasses)
        error (Exception): first fatal error of the run, None on success
        fetched (bool): True once the source page has been received
        started_at (datetime): processing time of the run (UTC)
    """

    site_name = None

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.error = None
        self.fetched = False
        self.started_at = datetime.now(timezone.utc)

    def processing_date(self):
        """Calendar date of the run in the source site's timezone (CALENDAR_TIMEZONE)."""
        tz = ZoneInfo(self.settings.get('CALENDAR_TIMEZONE', DEFAULT_TIMEZONE))
        return self.started_at.astimezone(tz).date()

    def log_error(self, message, level='error', exc_info=False, context=None):
        """Comprehensive error logging with context.

        Args:
            message (str): Error message
            level (str): Log level ('error', 'warning', 'info', 'debug')
            exc_info (bool): Include exception traceback
            context (dict): Additional context information
        """
        log_func = getattr(self.logger, level, self.logger.error)

        # Build context string
        context_str = ""
        if context:
            context_parts = [f"{k}={v}" for k, v in context.items()]
            context_str = f" | Context: {', '.join(context_parts)}"

        # Include spider info
        spider_info = f"[{self.name}]" if getattr(self, 'name', None) else "[Unknown]"

        full_message = f"{spider_info} {message}{context_str}"

        if exc_info:
            log_func(full_message, exc_info=True)
        else:
            log_func(full_message)

    def record_error(self, error):
        """Keep the first fatal error of the run."""
        if self.error is None:
            self.error = error

    def handle_error(self, failure):
        """Log a failed request and record it as SourceUnavailable."""
        try:
            url = failure.request.url if hasattr(failure, 'request') and failure.request else "<unknown>"
        except AttributeError:
            url = "<unknown>"

        # Determine error type
        error_type = failure.type.__name__ if getattr(failure, 'type', None) else "Unknown"
        error_value = str(failure.value) if hasattr(failure, 'value') else "Unknown"

        # Build context
        context = {
            'url': url,
            'error_type': error_type,
            'error_value': error_value[:200]  # Truncate long error messages
        }

        reason = error_value or error_type
        response = getattr(failure.value, 'response', None)
        if response is not None:
            status = response.status
            context['status_code'] = status
            reason = f"HTTP {status}"

            # Handle different status codes appropriately
            if status == 404:
                self.log_error(f"Page not found (404): {url}", level='warning', context=context)
            elif status == 403:
                self.log_error(f"Access forbidden (403): {url}", level='warning', context=context)
            elif status == 429:
                self.log_error(f"Rate limited (429): {url}", level='warning', context=context)
            elif status >= 500:
                self.log_error(f"Server error ({status}): {url}", level='error', context=context)
            else:
                self.log_error(f"HTTP error ({status}): {url}", level='error', context=context)
        else:
            # Non-HTTP error (timeout, DNS, etc.)
            self.log_error(f"Request failed: {url}", level='error', context=context)

        self.record_error(SourceUnavailable(url, reason))
