"""
Tests for listing and detail view models.
"""

from agent0_explorer.core.listing import ListingParams
from agent0_explorer.core.models import AgentRecord, FeedbackRecord, GlobalStats
from agent0_explorer.core.views import (
    build_agent_card,
    build_detail_page,
    build_listing_page,
    resolve_total,
)

from conftest import make_agent_data, make_feedback_data


def record(token_id=42, **overrides):
    return AgentRecord.from_dict(make_agent_data(token_id, **overrides))


class TestAgentCard:

    def test_card_fields(self):
        card = build_agent_card(record(totalFeedback='3'))
        assert card.name == 'Agent 42'
        assert card.href == '/agent/11155111%3A42'
        assert card.owner == '0x5aae...eaed'
        assert card.created == 'Nov 14, 2023'
        assert card.feedbackCount == 3
        assert not card.hasEndpoint

    def test_fallback_name_without_metadata(self):
        card = build_agent_card(record(7, registrationFile=None))
        assert card.name == 'Agent #7'
        assert card.description is None
        assert card.trusts == []

    def test_trusts_capped_at_three(self):
        reg = dict(make_agent_data(1)['registrationFile'],
                   supportedTrusts=['reputation', 'crypto-economic', 'tee-attestation', 'zk'])
        card = build_agent_card(record(1, registrationFile=reg))
        assert card.trusts == ['reputation', 'crypto-economic', 'tee-attestation']

    def test_endpoint_badge(self):
        reg = dict(make_agent_data(1)['registrationFile'], a2aEndpoint='https://agent.example/a2a')
        assert build_agent_card(record(1, registrationFile=reg)).hasEndpoint


class TestResolveTotal:

    def test_unfiltered_uses_stats(self):
        assert resolve_total(GlobalStats(totalAgents=120), None) == 120

    def test_filtered_count_wins(self):
        assert resolve_total(GlobalStats(totalAgents=120), 7) == 7

    def test_filtered_zero(self):
        assert resolve_total(GlobalStats(totalAgents=120), 0) == 0


class TestListingPage:

    def test_first_page(self):
        params = ListingParams.from_query({})
        page = build_listing_page(params, [record(i) for i in range(24)], 60)

        assert len(page.cards) == 24
        assert page.totalPages == 3
        assert page.previousUrl is None
        assert page.nextUrl == '/?page=2'
        assert page.clearUrl == '/'
        assert not page.hasActiveFilters
        assert page.summary == '60 registered agents on Ethereum Sepolia'

    def test_middle_page_links(self):
        params = ListingParams.from_query({'page': '2', 'search': 'bot'})
        page = build_listing_page(params, [], 60)

        assert page.previousUrl == '/?search=bot'
        assert page.nextUrl == '/?search=bot&page=3'

    def test_last_page_has_no_next(self):
        params = ListingParams.from_query({'page': '3'})
        assert build_listing_page(params, [], 60).nextUrl is None

    def test_filter_toggles_reset_page(self):
        params = ListingParams.from_query({'page': '2', 'hasReviews': 'true'})
        page = build_listing_page(params, [], 60)

        assert page.hasReviewsToggleUrl == '/'
        assert page.hasEndpointToggleUrl == '/?hasReviews=true&hasEndpoint=true'

    def test_page_size_urls(self):
        params = ListingParams.from_query({'page': '4', 'search': 'bot'})
        page = build_listing_page(params, [], 500)

        assert page.pageSizeUrls == {
            12: '/?search=bot&perPage=12',
            24: '/?search=bot',
            48: '/?search=bot&perPage=48',
            99: '/?search=bot&perPage=99',
        }

    def test_filtered_summary(self):
        params = ListingParams.from_query({'hasEndpoint': 'true'})
        page = build_listing_page(params, [], 1234)

        assert page.hasActiveFilters
        assert page.summary == '1,234 matching agents'

    def test_empty_result(self):
        page = build_listing_page(ListingParams.from_query({'search': 'zzz'}), [], 0)

        assert page.cards == []
        assert page.totalPages == 0
        assert page.nextUrl is None
        assert page.previousUrl is None


class TestDetailPage:

    def _feedback(self):
        return [
            FeedbackRecord.from_dict(make_feedback_data(1, 80, tag2='\x00\x01\x02')),
            FeedbackRecord.from_dict(make_feedback_data(2, 90)),
            FeedbackRecord.from_dict(make_feedback_data(3, 100)),
            FeedbackRecord.from_dict(make_feedback_data(4, 0, revoked=True)),
        ]

    def test_detail_fields(self):
        page = build_detail_page(record(totalFeedback='3'), self._feedback())

        assert page.name == 'Agent 42'
        assert page.initial == 'A'
        assert page.owner == '0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed'
        assert page.ownerShort == '0x5aae...eaed'
        assert page.created == 'Nov 14, 2023'
        assert page.averageScore == 90
        assert page.totalFeedback == 3

    def test_reviews_skip_revoked_and_noise(self):
        page = build_detail_page(record(), self._feedback())

        assert [r.score for r in page.reviews] == [80, 90, 100]
        first = page.reviews[0]
        assert first.tags == ['enterprise']
        assert first.reviewer == '0xabcd...ef01'
        assert first.created == 'Jan 5, 2024'
        assert first.text == 'Solid agent'
        assert first.skill == 'python'

    def test_no_feedback(self):
        page = build_detail_page(record(), [])

        assert page.averageScore is None
        assert page.reviews == []

    def test_missing_registration_file(self):
        page = build_detail_page(record(9, registrationFile=None), [])

        assert page.name == 'Agent #9'
        assert page.initial == 'A'
        assert page.mcpEndpoint is None
        assert page.image is None
