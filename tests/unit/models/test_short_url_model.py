"""Unit tests for the ShortURLModel dataclass in short_url_model.py.

Test coverage includes:

1. Model creation and required fields
   - Ensures instances get an id, a creation time and an empty click history.
   - Ensures missing target or shortcode raise ValidationError.

2. Immutability
   - Verifies id, created_at, expires_at and clicks can't be reassigned,
     while target and shortcode can.

3. Clicks
   - Ensures add_click() appends chronologically and click_count() follows.

4. Expiry
   - Verifies is_expired() and time_until_expiry() with a frozen clock,
     including records without expiry.

5. Validation helpers
   - validate_url() and validate_shortcode() accept/reject representative inputs.

6. Serialization
   - to_dict() exposes a JSON-ready snapshot including click history.
"""

import json
from datetime import datetime, timedelta, UTC

import pytest
from freezegun import freeze_time

from shortlinks.exceptions import ValidationError
from shortlinks.models import ClickModel, Location, ShortURLModel


# -------------------------------
# 1. Model creation
# -------------------------------

@freeze_time('2025-10-15 12:00:00')
def test_valid_short_url_model_creation():
    """Ensure ShortURLModel can be created with valid data."""
    expires_at = datetime(2025, 10, 15, 12, 30, tzinfo=UTC)
    short_url = ShortURLModel(target='https://example.com/article/123', shortcode='abc123', expires_at=expires_at)

    assert short_url.target == 'https://example.com/article/123'
    assert short_url.shortcode == 'abc123'
    assert short_url.expires_at == expires_at
    assert short_url.created_at == datetime(2025, 10, 15, 12, 0, tzinfo=UTC)
    assert short_url.clicks == []
    assert isinstance(short_url.id, str) and len(short_url.id) == 36


def test_ids_are_unique():
    first = ShortURLModel(target='https://example.com', shortcode='abc123')
    second = ShortURLModel(target='https://example.com', shortcode='abc123')
    assert first.id != second.id


@pytest.mark.parametrize('target, shortcode', [('', 'abc123'), ('https://example.com', ''), (None, 'abc123')])
def test_missing_required_fields_raise_validation_error(target, shortcode):
    with pytest.raises(ValidationError):
        ShortURLModel(target=target, shortcode=shortcode)


# -------------------------------
# 2. Immutability
# -------------------------------

@pytest.mark.parametrize('field', ['id', 'created_at', 'expires_at', 'clicks'])
def test_identity_fields_are_immutable(field):
    short_url = ShortURLModel(target='https://example.com', shortcode='abc123')
    with pytest.raises(AttributeError):
        setattr(short_url, field, None)


def test_target_and_shortcode_are_mutable():
    short_url = ShortURLModel(target='https://example.com', shortcode='abc123')
    short_url.target = 'https://example.org'
    short_url.shortcode = 'xyz789'
    assert (short_url.target, short_url.shortcode) == ('https://example.org', 'xyz789')


# -------------------------------
# 3. Clicks
# -------------------------------

def test_add_click_appends_in_order():
    short_url = ShortURLModel(target='https://example.com', shortcode='abc123')

    with freeze_time('2025-10-15 12:00:00') as frozen:
        first = short_url.add_click(ip='203.0.113.7', user_agent='curl/8.5')
        frozen.tick(timedelta(seconds=5))
        second = short_url.add_click(ip='198.51.100.1', referer='https://news.example.com', location=Location('US', 'CA', 'San Francisco'))

    assert short_url.clicks == [first, second]
    assert short_url.click_count() == 2
    assert isinstance(first, ClickModel)
    assert first.id != second.id
    assert first.timestamp < second.timestamp
    assert first.location == Location.unknown()
    assert second.location.city == 'San Francisco'


# -------------------------------
# 4. Expiry
# -------------------------------

def test_no_expiry():
    short_url = ShortURLModel(target='https://example.com', shortcode='abc123')
    assert short_url.is_expired() is False
    assert short_url.time_until_expiry() is None


def test_expiry_boundary():
    with freeze_time('2025-10-15 12:00:00') as frozen:
        short_url = ShortURLModel(
            target='https://example.com',
            shortcode='abc123',
            expires_at=datetime.now(UTC) + timedelta(minutes=1),
        )
        assert short_url.is_expired() is False
        assert short_url.time_until_expiry() == 1

        frozen.tick(timedelta(seconds=30))
        assert short_url.time_until_expiry() == 0

        # Expired only once now > expires_at
        frozen.tick(timedelta(seconds=30))
        assert short_url.is_expired() is False

        frozen.tick(timedelta(seconds=1))
        assert short_url.is_expired() is True
        assert short_url.time_until_expiry() == -1

        frozen.tick(timedelta(minutes=10))
        assert short_url.time_until_expiry() == -11


# -------------------------------
# 5. Validation helpers
# -------------------------------

@pytest.mark.parametrize(
    'url',
    ['https://example.com', 'http://example.com/a/b?c=d#e', 'ftp://files.example.com/x', 'http://localhost:3000/path'],
)
def test_validate_url_accepts_absolute_urls(url):
    assert ShortURLModel.validate_url(url) is True


@pytest.mark.parametrize(
    'url',
    ['', None, 42, 'example.com', '/relative/path', 'https://', 'not a url', 'https://exa mple.com', 'http://[::1'],
)
def test_validate_url_rejects_invalid_urls(url):
    assert ShortURLModel.validate_url(url) is False


@pytest.mark.parametrize('shortcode', ['a', 'abc123', 'my-link_2', 'A' * 20])
def test_validate_shortcode_accepts_valid_codes(shortcode):
    assert ShortURLModel.validate_shortcode(shortcode) is True


@pytest.mark.parametrize('shortcode', ['', None, 'A' * 21, 'has space', 'bad/slash', 'emoji😀', 'abc\n'])
def test_validate_shortcode_rejects_invalid_codes(shortcode):
    assert ShortURLModel.validate_shortcode(shortcode) is False


def test_validate_shortcode_respects_max_length():
    assert ShortURLModel.validate_shortcode('abcdef', max_length=5) is False
    assert ShortURLModel.validate_shortcode('abcde', max_length=5) is True


# -------------------------------
# 6. Serialization
# -------------------------------

@freeze_time('2025-10-15 12:00:00')
def test_to_dict_snapshot():
    short_url = ShortURLModel(
        target='https://example.com',
        shortcode='abc123',
        expires_at=datetime.now(UTC) + timedelta(minutes=30),
    )
    click = short_url.add_click(ip='203.0.113.7')

    snapshot = short_url.to_dict()

    assert snapshot['id'] == short_url.id
    assert snapshot['shortcode'] == 'abc123'
    assert snapshot['original_url'] == 'https://example.com'
    assert snapshot['created_at'] == '2025-10-15T12:00:00+00:00'
    assert snapshot['expires_at'] == '2025-10-15T12:30:00+00:00'
    assert snapshot['total_clicks'] == 1
    assert snapshot['time_until_expiry'] == 30
    assert snapshot['clicks'] == [
        {
            'id': click.id,
            'timestamp': '2025-10-15T12:00:00+00:00',
            'ip': '203.0.113.7',
            'user_agent': None,
            'referer': None,
            'location': {'country': 'Unknown', 'region': 'Unknown', 'city': 'Unknown'},
        }
    ]
    # JSON-ready
    json.dumps(snapshot)
