from dataclasses import dataclass, field, asdict
from datetime import datetime
from typing import Any

from shortlinks.constants import UNKNOWN


# fmt: off
@dataclass(frozen=True)
class Location:
    country: str = UNKNOWN  # ISO country code, e.g. 'US'
    region: str = UNKNOWN   # Region / state code, e.g. 'CA'
    city: str = UNKNOWN     # City name, e.g. 'San Francisco'

    @classmethod
    def unknown(cls) -> 'Location':
        return cls()

    def to_dict(self) -> dict[str, str]:
        return asdict(self)


@dataclass(frozen=True)
class RequestMetadata:
    ip: str | None = None          # Client IP address
    user_agent: str | None = None  # Value of the User-Agent header
    referer: str | None = None     # Value of the Referer header


@dataclass(frozen=True)
class ClickModel:
    id: str                                           # Unique click identifier (uuid4)
    timestamp: datetime                               # Aware UTC moment of the click
    ip: str | None = None                             # Client IP address
    user_agent: str | None = None                     # Client User-Agent
    referer: str | None = None                        # Referring page
    location: Location = field(default_factory=Location)  # Resolved at click time

    def to_dict(self) -> dict[str, Any]:
        return {
            'id': self.id,
            'timestamp': self.timestamp.isoformat(),
            'ip': self.ip,
            'user_agent': self.user_agent,
            'referer': self.referer,
            'location': self.location.to_dict(),
        }
# fmt: on
