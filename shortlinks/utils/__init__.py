from shortlinks.utils.config import Settings, app_env, load_config
from shortlinks.utils.shortener import generate_shortcode, random_shortcode
from shortlinks.utils.logging import initialize_logging
from shortlinks.utils.scheduling import RepeatingTask


__all__ = [
    'Settings',
    'app_env',
    'load_config',
    'generate_shortcode',
    'random_shortcode',
    'initialize_logging',
    'RepeatingTask',
]
