from localshortener.registry.event_log import EventLog
from localshortener.registry.short_url_registry import ShortURLRegistry
from localshortener.registry.redirect_resolver import RedirectResolver, RedirectOutcome


__all__ = [
    'EventLog',
    'ShortURLRegistry',
    'RedirectResolver',
    'RedirectOutcome',
]
