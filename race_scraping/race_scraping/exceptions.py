"""Exceptions raised while turning the calendar page into race records."""


class RaceScrapingError(Exception):
    """Base class for all project errors."""


class FragmentRejected(RaceScrapingError):
    """A fragment did not pass the validation gate.

    Raised when the derived title, date, location or distances are missing.
    The parser skips the fragment without surfacing the error.
    """

    def __init__(self, reason, anchor_text=None):
        super().__init__(reason)
        self.reason = reason
        self.anchor_text = anchor_text


class FieldExtractionError(RaceScrapingError):
    """Unexpected failure while deriving the fields of one fragment."""

    def __init__(self, message, anchor_text=None):
        super().__init__(message)
        self.anchor_text = anchor_text


class SourceUnavailable(RaceScrapingError):
    """The calendar page could not be downloaded."""

    def __init__(self, url, reason):
        super().__init__(f"Unable to fetch {url}: {reason}")
        self.url = url
        self.reason = reason
