from localshortener.models.short_url_model import ShortURLModel, ClickModel
from localshortener.models.shorten_request_model import ShortenRequestModel
from localshortener.models.event_log_model import EventLogEntryModel


__all__ = [
    'ShortURLModel',
    'ClickModel',
    'ShortenRequestModel',
    'EventLogEntryModel',
]
