from typing import Any, TypeAlias
from collections.abc import Callable, Mapping


# Geo lookup collaborator: ip -> {'country': ..., 'region': ..., 'city': ...} or None
GeoLookup: TypeAlias = Callable[[str], Mapping[str, Any] | None]

# JSON-ready statistics payloads
StatsPayload: TypeAlias = dict[str, Any]
