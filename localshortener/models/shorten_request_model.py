from dataclasses import dataclass
from typing import Any


# fmt: off
@dataclass(frozen=True)
class ShortenRequestModel:
    long_url: Any                 # Long URL to shorten (validated by the registry)
    validity: Any = None          # Validity period in minutes; None or '' means default
    shortcode: Any = None         # Desired custom shortcode; None or '' means generate one
# fmt: on
