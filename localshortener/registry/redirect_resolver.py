"""Redirect resolution

Translates a requested shortcode into a navigation outcome: either the
target URL of a live record, or a fallback to the home view when the
shortcode is unknown or expired.

Example:
    >>> resolver = RedirectResolver(registry)
    >>> resolver.resolve_for_redirect('abc123')
    RedirectOutcome(target='https://example.com', fallback=False, reason=None)
    >>> resolver.resolve_for_redirect('nope')
    RedirectOutcome(target=None, fallback=True, reason='not_found')
"""

import logging
from dataclasses import dataclass

from localshortener.constants import Event
from localshortener.dao.exceptions import ShortURLNotFoundError
from localshortener.exceptions import ShortURLExpiredError
from localshortener.registry.short_url_registry import ShortURLRegistry


logger = logging.getLogger(__name__)

NOT_FOUND = 'not_found'
EXPIRED = 'expired'


# fmt: off
@dataclass(frozen=True)
class RedirectOutcome:
    target: str | None = None     # Where to navigate (only set when not falling back)
    fallback: bool = False        # True means navigate to the home view instead
    reason: str | None = None     # 'not_found' or 'expired' when falling back
# fmt: on


class RedirectResolver:
    """Resolve shortcodes for redirection

    Attributes:
        registry (ShortURLRegistry):
            Registry holding the short URL records.
        record_clicks (bool):
            If True, every successful resolution appends a click to the record.
            Off by default: redirects don't count clicks unless configured to.
    """

    def __init__(self, registry: ShortURLRegistry, record_clicks: bool = False):
        self.registry = registry
        self.record_clicks = record_clicks

    def resolve_for_redirect(self, shortcode: str, locale: str | None = None, timezone: str | None = None) -> RedirectOutcome:
        try:
            short_url = self.registry.resolve_live(shortcode)
        except ShortURLNotFoundError:
            return self._fallback(shortcode, NOT_FOUND)
        except ShortURLExpiredError:
            return self._fallback(shortcode, EXPIRED)

        if self.record_clicks:
            self.registry.record_click(shortcode, locale=locale, timezone=timezone)

        logger.debug('Resolved shortcode %s.', shortcode, extra={'shortcode': shortcode, 'target': short_url.target})
        self._log(Event.REDIRECT_RESOLVED, {'shortcode': shortcode, 'longUrl': short_url.target})
        return RedirectOutcome(target=short_url.target)

    def _fallback(self, shortcode: str, reason: str) -> RedirectOutcome:
        logger.info('Falling back to home view.', extra={'shortcode': shortcode, 'reason': reason})
        self._log(Event.REDIRECT_FALLBACK, {'shortcode': shortcode, 'reason': reason})
        return RedirectOutcome(fallback=True, reason=reason)

    def _log(self, event: str, payload: dict) -> None:
        if self.registry.event_log is not None:
            self.registry.event_log.log(event, payload)
