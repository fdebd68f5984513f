"""
Tests for display helpers.
"""

import pytest

from agent0_explorer.core.formatting import (
    average_score,
    checksum_address,
    format_address,
    format_timestamp,
    is_readable_text,
    readable_tags,
)
from agent0_explorer.core.models import FeedbackRecord


def feedback(score, revoked=False, tag1=None, tag2=None):
    return FeedbackRecord(
        id=f'fb-{score}',
        score=score,
        clientAddress='0xabcdef0123456789abcdef0123456789abcdef01',
        isRevoked=revoked,
        tag1=tag1,
        tag2=tag2,
    )


class TestFormatAddress:

    def test_truncates(self):
        assert format_address('0x1234567890abcdef') == '0x1234...cdef'

    def test_full_address(self):
        assert format_address('0x5aaeb6053f3e94c9b9a09f33669435e7ef1beaed') == '0x5aae...eaed'


class TestChecksumAddress:

    def test_eip55(self):
        assert checksum_address('0x5aaeb6053f3e94c9b9a09f33669435e7ef1beaed') == \
            '0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed'

    def test_non_address_passes_through(self):
        assert checksum_address('not-an-address') == 'not-an-address'
        assert checksum_address('') == ''


class TestFormatTimestamp:

    @pytest.mark.parametrize('timestamp,expected', [
        (1704412800, 'Jan 5, 2024'),
        ('1704412800', 'Jan 5, 2024'),
        (1700000000, 'Nov 14, 2023'),
        (0, 'Jan 1, 1970'),
    ])
    def test_formats_utc_date(self, timestamp, expected):
        assert format_timestamp(timestamp) == expected


class TestReadableText:

    def test_plain_ascii(self):
        assert is_readable_text('enterprise')

    def test_empty_is_not_readable(self):
        assert not is_readable_text('')
        assert not is_readable_text(None)

    def test_mostly_binary(self):
        # 4 of 10 characters outside printable ASCII
        assert not is_readable_text('abcdef\x00\x01\x02\x03')

    def test_few_non_printable(self):
        # 1 of 10
        assert is_readable_text('abcdefghi\x00')

    def test_threshold_is_exclusive(self):
        # exactly 30%
        assert not is_readable_text('abcdefg\x00\x01\x02')

    def test_non_ascii_counts_as_unreadable(self):
        assert not is_readable_text('ééé')

    def test_readable_tags(self):
        fb = feedback(50, tag1='\x00\x01\x02\x03', tag2='quality')
        assert readable_tags(fb) == ['quality']


class TestAverageScore:

    def test_mean(self):
        assert average_score([feedback(80), feedback(90), feedback(100)]) == 90

    def test_empty(self):
        assert average_score([]) is None

    def test_all_revoked(self):
        assert average_score([feedback(80, revoked=True)]) is None

    def test_revoked_excluded(self):
        assert average_score([feedback(80), feedback(0, revoked=True)]) == 80

    def test_half_rounds_up(self):
        assert average_score([feedback(80), feedback(81)]) == 81

    def test_rounds_down_below_half(self):
        assert average_score([feedback(1), feedback(1), feedback(2)]) == 1
