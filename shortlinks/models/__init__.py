from shortlinks.models.click_model import ClickModel, Location, RequestMetadata
from shortlinks.models.short_url_model import ShortURLModel


__all__ = [
    'ClickModel',
    'Location',
    'RequestMetadata',
    'ShortURLModel',
]
