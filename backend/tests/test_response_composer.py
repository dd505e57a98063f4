"""
Test Suite for ResponseComposer

Covers:
1. Dash-line and PROS/CONS parsing contracts
2. Prompt construction
3. Fallback behavior when the model fails or drifts from the format
"""

import pytest
from openai import APITimeoutError
from unittest.mock import MagicMock

from engine.models import Intent
from app.services.errors import ModelCallError
from app.services.response_composer import (
    ResponseComposer,
    build_analysis_prompt,
    build_recommendation_prompt,
    build_summary_prompt,
    fallback_message,
    parse_dash_lines,
    parse_pros_cons,
)


# =============================================================================
# Parsers
# =============================================================================

class TestParseDashLines:

    def test_keeps_only_dash_lines(self):
        text = (
            "Here are my recommendations:\n"
            "- Axis ACE: 1.5% flat cashback everywhere\n"
            "  - HDFC Millennia: 5% on partner sites  \n"
            "* not a dash bullet\n"
            "1. numbered line\n"
            "Hope this helps!"
        )
        assert parse_dash_lines(text) == [
            "Axis ACE: 1.5% flat cashback everywhere",
            "HDFC Millennia: 5% on partner sites",
        ]

    def test_empty_text(self):
        assert parse_dash_lines("") == []
        assert parse_dash_lines(None) == []

    def test_bare_markers_are_dropped(self):
        assert parse_dash_lines("-\n- real item\n-   ") == ["real item"]


class TestParseProsCons:

    def test_well_formed_answer(self):
        text = """Here is my analysis.
PROS:
- High cashback on dining
- Lounge access

CONS:
- High annual fee
- Invite only
"""
        pros, cons = parse_pros_cons(text)
        assert pros == ["High cashback on dining", "Lounge access"]
        assert cons == ["High annual fee", "Invite only"]

    def test_headers_are_case_insensitive(self):
        pros, cons = parse_pros_cons("**Pros**\n- good\n**Cons**\n- bad")
        assert pros == ["good"]
        assert cons == ["bad"]

    def test_missing_cons_header_gives_empty_cons(self):
        pros, cons = parse_pros_cons("PROS:\n- good rewards\n- free lounge\nThat's all.")
        assert pros == ["good rewards", "free lounge"]
        assert cons == []

    def test_missing_pros_header_keeps_cons(self):
        pros, cons = parse_pros_cons("Summary\n- good\nCONS:\n- High fee")
        assert pros == []
        assert cons == ["High fee"]

    def test_no_headers_gives_nothing(self):
        assert parse_pros_cons("- something\n- else") == ([], [])

    def test_list_items_mentioning_cons_are_not_headers(self):
        pros, cons = parse_pros_cons("PROS:\n- Considerable welcome bonus\nCONS:\n- Fee")
        assert pros == ["Considerable welcome bonus"]
        assert cons == ["Fee"]


# =============================================================================
# Prompts
# =============================================================================

def test_summary_prompt_mentions_query_intent_and_count():
    prompt = build_summary_prompt("travel cards", Intent.RECOMMEND, 4)
    assert '"travel cards"' in prompt
    assert "Intent: recommend" in prompt
    assert "Found 4 credit cards" in prompt


def test_recommendation_prompt_lists_each_card(sample_cards):
    prompt = build_recommendation_prompt(sample_cards[:2])
    assert "Axis MY Zone (Axis Bank)" in prompt
    assert "Axis ACE (Axis Bank)" in prompt
    assert "Annual Fee: ₹500" in prompt


def test_analysis_prompt_requests_fixed_format(sample_cards):
    prompt = build_analysis_prompt(sample_cards[3])
    assert "PROS:" in prompt and "CONS:" in prompt
    assert "Lounge Access: Yes" in prompt
    assert "Fuel Cashback: No" in prompt


# =============================================================================
# Composer behavior
# =============================================================================

class TestSummarize:

    def test_returns_model_text(self, stub_model_cls):
        composer = ResponseComposer(stub_model_cls(summary="  I found 2 great cards.  "))
        assert composer.summarize("cashback", Intent.SEARCH, 2) == "I found 2 great cards."

    def test_model_failure_uses_result_count_message(self, stub_model_cls):
        composer = ResponseComposer(stub_model_cls(summary=ModelCallError("down")))
        assert composer.summarize("cashback", Intent.SEARCH, 3) == (
            'Found 3 credit cards matching your search for "cashback".'
        )

    def test_empty_text_uses_fallback(self, stub_model_cls):
        composer = ResponseComposer(stub_model_cls(summary="   "))
        assert composer.summarize("fuel", Intent.SEARCH, 0) == fallback_message("fuel", 0)

    def test_unexpected_error_is_not_raised(self, stub_model_cls):
        composer = ResponseComposer(stub_model_cls(summary=RuntimeError("boom")))
        assert composer.summarize("x", Intent.SEARCH, 1) == fallback_message("x", 1)


class TestRecommend:

    def test_parses_bullets(self, stub_model_cls, sample_cards):
        model = stub_model_cls(bullets="Sure!\n- ACE: flat 1.5%\n- MY Zone: lifetime free\nEnjoy.")
        assert ResponseComposer(model).recommend(sample_cards[:2]) == ["ACE: flat 1.5%", "MY Zone: lifetime free"]

    def test_no_cards_means_no_call(self, stub_model_cls):
        model = stub_model_cls()
        assert ResponseComposer(model).recommend([]) == []
        assert model.calls == []

    def test_failure_returns_empty_list(self, stub_model_cls, sample_cards):
        model = stub_model_cls(bullets=ModelCallError("rate limited"))
        assert ResponseComposer(model).recommend(sample_cards[:3]) == []


class TestAnalyzeCard:

    def test_parsed_analysis(self, stub_model_cls, sample_cards):
        model = stub_model_cls(bullets="PROS:\n- Lounge access\nCONS:\n- Expensive")
        analysis = ResponseComposer(model).analyze_card(sample_cards[3])
        assert analysis.pros == ["Lounge access"]
        assert analysis.cons == ["Expensive"]
        assert analysis.is_fallback is False

    def test_missing_cons_header_uses_card_fallback(self, stub_model_cls, sample_cards):
        card = sample_cards[3]
        model = stub_model_cls(bullets="PROS:\n- Lounge access\n- Golf")
        analysis = ResponseComposer(model).analyze_card(card)
        assert analysis.pros == ["Lounge access", "Golf"]
        assert analysis.cons == ["₹12000 annual fee"]
        assert analysis.is_fallback is True

    def test_missing_pros_header_keeps_model_cons(self, stub_model_cls, sample_cards):
        card = sample_cards[3]
        model = stub_model_cls(bullets="Overall a luxury card.\nCONS:\n- Invite only")
        analysis = ResponseComposer(model).analyze_card(card)
        assert analysis.pros == ["5% on dining cashback rate", "Reward Points rewards"]
        assert analysis.cons == ["Invite only"]
        assert analysis.is_fallback is True

    def test_model_failure_uses_full_fallback(self, stub_model_cls, sample_cards):
        card = sample_cards[1]
        model = stub_model_cls(bullets=ModelCallError("timeout"))
        analysis = ResponseComposer(model).analyze_card(card)
        assert analysis.pros == ["1.5% flat cashback rate", "Cashback rewards"]
        assert analysis.cons == ["₹500 annual fee"]
        assert analysis.is_fallback is True

    def test_openai_client_timeout_is_absorbed(self, sample_cards):
        """A raw OpenAI timeout from a real client is wrapped and absorbed."""
        from app.services.llm_client import OpenAICardModel

        client = MagicMock()
        client.chat.completions.create.side_effect = APITimeoutError(request=MagicMock())
        analysis = ResponseComposer(OpenAICardModel(client=client)).analyze_card(sample_cards[0])
        assert analysis.is_fallback is True
        assert analysis.cons == ["₹0 annual fee"]
