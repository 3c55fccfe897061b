# Copyright (c) 2026 Heureum AI. All rights reserved.

"""Tests for bridge_agent.services.response.length_controller."""

import itertools
import logging

import pytest
from pydantic import ValidationError

from bridge_agent.models import (
    LengthConfig,
    QueryAnalysis,
    QueryType,
    ResponseLengthConfig,
    ResponseProfile,
)
from bridge_agent.services.response.length_controller import (
    PROFILE_LIMITS,
    QUERY_TYPE_LIMITS,
    _round_half_up,
    adjust_for_context,
    enforce_token_limits,
    get_optimal_max_tokens,
    get_response_length_config,
    get_thinking_budget,
)


def _config(max_tokens: int) -> LengthConfig:
    return LengthConfig(
        max_tokens=max_tokens,
        profile=ResponseProfile.STANDARD,
        query_type=QueryType.SIMPLE.value,
    )


# ---------------------------------------------------------------------------
# Budget tables
# ---------------------------------------------------------------------------


class TestBudgetTables:
    """Tests for the fixed profile and query-type tables."""

    def test_profile_limits(self):
        """Verify the profile ceilings."""
        assert PROFILE_LIMITS[ResponseProfile.CONCISE] == 1024
        assert PROFILE_LIMITS[ResponseProfile.STANDARD] == 4096
        assert PROFILE_LIMITS[ResponseProfile.DETAILED] == 8192

    def test_query_type_limits(self):
        """Verify the query-type limits."""
        assert QUERY_TYPE_LIMITS["yes_no"] == 256
        assert QUERY_TYPE_LIMITS["status_check"] == 512
        assert QUERY_TYPE_LIMITS["list"] == 1024
        assert QUERY_TYPE_LIMITS["troubleshooting"] == 6144

    def test_tables_read_only(self):
        """Verify the tables cannot be mutated at runtime."""
        with pytest.raises(TypeError):
            PROFILE_LIMITS[ResponseProfile.CONCISE] = 1
        with pytest.raises(TypeError):
            QUERY_TYPE_LIMITS["yes_no"] = 1

    def test_round_half_up(self):
        """Verify halves round up rather than to even."""
        assert _round_half_up(2.5) == 3
        assert _round_half_up(3.5) == 4
        assert _round_half_up(3276.8) == 3277
        assert _round_half_up(2457.4) == 2457


# ---------------------------------------------------------------------------
# get_optimal_max_tokens
# ---------------------------------------------------------------------------


class TestGetOptimalMaxTokens:
    """Tests for the context-free token ceiling."""

    def test_yes_no_capped(self):
        """Verify yes/no questions are capped at 256 tokens."""
        config = get_optimal_max_tokens("Is the service healthy?")
        assert config.max_tokens == 256
        assert config.profile == ResponseProfile.CONCISE
        assert config.query_type == "simple"

    def test_status_check_capped(self):
        """Verify status checks share the short-answer cap."""
        config = get_optimal_max_tokens("What is the status of the API?")
        assert config.max_tokens == 256

    def test_list_query(self):
        """Verify list queries get the standard ceiling."""
        config = get_optimal_max_tokens("List all active alerts")
        assert config.max_tokens == 4096
        assert config.profile == ResponseProfile.STANDARD
        assert config.query_type == "data_retrieval"

    def test_analysis_query(self):
        """Verify analysis queries get the detailed ceiling."""
        config = get_optimal_max_tokens("Analyze the performance degradation")
        assert config.max_tokens == 8192
        assert config.profile == ResponseProfile.DETAILED

    def test_default_query(self):
        """Verify unmatched queries get the standard ceiling."""
        config = get_optimal_max_tokens("Tell me about deployments")
        assert config.max_tokens == 4096
        assert config.profile == ResponseProfile.STANDARD

    def test_tools_multiplier(self):
        """Verify tool use multiplies the ceiling by 1.5."""
        without = get_optimal_max_tokens("List all alerts")
        with_tools = get_optimal_max_tokens("List all alerts", tools_enabled=True)
        assert with_tools.max_tokens == 6144
        assert with_tools.max_tokens > without.max_tokens

    def test_tools_multiplier_on_short_answers(self):
        """Verify the multiplier applies after the yes/no cap."""
        config = get_optimal_max_tokens("Is it up?", tools_enabled=True)
        assert config.max_tokens == 384

    def test_absolute_cap(self):
        """Verify the ceiling never exceeds 8192 tokens."""
        config = get_optimal_max_tokens("Analyze the logs", tools_enabled=True)
        assert config.max_tokens == 8192

    def test_preferred_profile_enum(self):
        """Verify an explicit profile overrides complexity."""
        config = get_optimal_max_tokens("Analyze the system", ResponseProfile.CONCISE)
        assert config.profile == ResponseProfile.CONCISE
        assert config.max_tokens == 1024

    def test_preferred_profile_string(self):
        """Verify profiles may be passed by value."""
        config = get_optimal_max_tokens("Tell me a story", "detailed")
        assert config.profile == ResponseProfile.DETAILED
        assert config.max_tokens == 8192

    def test_list_floor_with_concise_profile(self):
        """Verify list queries keep at least 1024 tokens."""
        config = get_optimal_max_tokens("List all alerts", "concise")
        assert config.max_tokens == 1024

    def test_invalid_profile(self):
        """Verify an unknown profile name is rejected."""
        with pytest.raises(ValueError):
            get_optimal_max_tokens("hello", "verbose")


# ---------------------------------------------------------------------------
# adjust_for_context
# ---------------------------------------------------------------------------


class TestAdjustForContext:
    """Tests for conversation-length and attachment adjustments."""

    def test_short_conversation_unchanged(self):
        """Verify conversations of up to 10 messages are not reduced."""
        assert adjust_for_context(_config(4096), 5, False) == 4096
        assert adjust_for_context(_config(4096), 10, False) == 4096

    def test_long_conversation(self):
        """Verify conversations over 10 messages are reduced to 80%."""
        assert adjust_for_context(_config(4096), 15, False) == 3277
        assert adjust_for_context(_config(4096), 20, False) == 3277

    def test_very_long_conversation_not_cumulative(self):
        """Verify the 60% factor replaces the 80% factor."""
        assert adjust_for_context(_config(4096), 25, False) == 2458

    def test_files_increase(self):
        """Verify attachments increase the ceiling by 20%."""
        assert adjust_for_context(_config(4096), 5, True) == 4915

    def test_files_and_long_conversation(self):
        """Verify both adjustments compose."""
        # 4096 * 0.8 = 3277, 3277 * 1.2 = 3932.4
        assert adjust_for_context(_config(4096), 15, True) == 3932

    def test_floor(self):
        """Verify the adjusted ceiling never drops below 256."""
        assert adjust_for_context(_config(100), 30, False) == 256


# ---------------------------------------------------------------------------
# get_thinking_budget
# ---------------------------------------------------------------------------


class TestGetThinkingBudget:
    """Tests for the complexity-tiered thinking budget."""

    @pytest.mark.parametrize(
        "complexity,expected",
        [
            (0.0, 2000),
            (0.29, 2000),
            (0.3, 5000),
            (0.69, 5000),
            (0.7, 10000),
            (1.0, 10000),
        ],
    )
    def test_tiers(self, complexity, expected):
        """Verify tier boundaries with ample max_tokens."""
        assert get_thinking_budget(complexity, 16000) == expected

    def test_clamped_below_max_tokens(self):
        """Verify a tier that does not fit reserves 1024 answer tokens."""
        assert get_thinking_budget(0.9, 4096) == 3072

    def test_clamp_floor(self):
        """Verify the clamped budget never drops below 1024."""
        assert get_thinking_budget(0.9, 2048) == 1024
        assert get_thinking_budget(0.1, 2000) == 1024

    def test_clamp_logged(self, caplog):
        """Verify clamping is logged as a warning."""
        with caplog.at_level(logging.WARNING):
            get_thinking_budget(0.9, 4096)
        assert any("Thinking budget" in r.getMessage() for r in caplog.records)

    def test_no_warning_when_fits(self, caplog):
        """Verify nothing is logged when the tier fits."""
        with caplog.at_level(logging.WARNING):
            get_thinking_budget(0.5, 16000)
        assert caplog.records == []


# ---------------------------------------------------------------------------
# enforce_token_limits
# ---------------------------------------------------------------------------


class TestEnforceTokenLimits:
    """Tests for hard token bounds."""

    def test_standard_range(self):
        """Verify clamping to [256, 8192]."""
        assert enforce_token_limits(100) == 256
        assert enforce_token_limits(2048) == 2048
        assert enforce_token_limits(10000) == 8192

    def test_standard_boundaries_inclusive(self):
        """Verify values on the boundaries are kept."""
        assert enforce_token_limits(256) == 256
        assert enforce_token_limits(8192) == 8192

    def test_extended_range(self):
        """Verify clamping to [4096, 16000] with extended thinking."""
        assert enforce_token_limits(2048, True) == 4096
        assert enforce_token_limits(12000, True) == 12000
        assert enforce_token_limits(20000, True) == 16000

    def test_clamp_logged(self, caplog):
        """Verify every clamp is logged as a warning."""
        with caplog.at_level(logging.WARNING):
            enforce_token_limits(100)
            enforce_token_limits(20000, True)
        warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert len(warnings) == 2


# ---------------------------------------------------------------------------
# get_response_length_config
# ---------------------------------------------------------------------------


class TestGetResponseLengthConfig:
    """Tests for the end-to-end length configuration."""

    def test_simple_query(self):
        """Verify a yes/no question gets a small ceiling and a valid budget."""
        config = get_response_length_config("Is the service healthy?", conversation_length=5)
        assert config.max_tokens == 256
        assert config.profile == ResponseProfile.CONCISE
        assert config.thinking_budget < config.max_tokens

    def test_short_ceiling_halves_budget(self):
        """Verify a budget that still does not fit falls back to half the ceiling."""
        config = get_response_length_config("Is the service healthy?")
        assert config.thinking_budget == 128

    def test_analysis_with_extended_thinking(self):
        """Verify the full analysis scenario with tools, files and thinking."""
        config = get_response_length_config(
            "Analyze the performance degradation across all services",
            conversation_length=5,
            has_files=True,
            tools_enabled=True,
            extended_thinking=True,
        )
        assert config.profile == ResponseProfile.DETAILED
        assert config.max_tokens == 16000
        assert config.thinking_budget == 10000
        assert config.analysis.type == QueryType.ANALYSIS

    def test_long_conversation_reduces(self):
        """Verify long conversations lower the ceiling."""
        short = get_response_length_config("List all alerts", conversation_length=2)
        long = get_response_length_config("List all alerts", conversation_length=25)
        assert short.max_tokens == 4096
        assert long.max_tokens == 2458

    def test_tools_and_files_increase(self):
        """Verify tools and files raise the ceiling."""
        base = get_response_length_config("List all alerts")
        boosted = get_response_length_config(
            "List all alerts", has_files=True, tools_enabled=True
        )
        assert boosted.max_tokens == 7373
        assert boosted.max_tokens > base.max_tokens

    def test_extended_thinking_doubles(self):
        """Verify extended thinking doubles the ceiling within bounds."""
        normal = get_response_length_config("Analyze the system")
        extended = get_response_length_config("Analyze the system", extended_thinking=True)
        assert normal.max_tokens == 8192
        assert extended.max_tokens == 16000

    def test_extended_thinking_floor(self):
        """Verify extended thinking raises short ceilings to 8192."""
        config = get_response_length_config("Is it working?", extended_thinking=True)
        assert config.max_tokens == 8192
        assert config.thinking_budget == 2000

    def test_explicit_profile(self):
        """Verify an explicit profile is carried through."""
        config = get_response_length_config("Tell me about deployments", profile="concise")
        assert config.profile == ResponseProfile.CONCISE
        assert config.max_tokens == 1024

    def test_analysis_attached(self):
        """Verify the classification is returned with the config."""
        config = get_response_length_config("List all alerts")
        assert config.analysis.type == QueryType.DATA_RETRIEVAL
        assert config.analysis.estimated_complexity == pytest.approx(0.4)

    def test_budget_invariant_across_inputs(self):
        """Verify thinking_budget < max_tokens for every input combination."""
        messages = [
            "",
            "Is it up?",
            "Status of the api",
            "List all alerts",
            "Analyze the outage",
            "Give me a full report",
            "Tell me something",
        ]
        profiles = [None, "concise", "standard", "detailed"]
        for message, profile, length, files, tools, extended in itertools.product(
            messages, profiles, [0, 11, 21, 100], [False, True], [False, True], [False, True]
        ):
            config = get_response_length_config(
                message,
                profile=profile,
                conversation_length=length,
                has_files=files,
                tools_enabled=tools,
                extended_thinking=extended,
            )
            assert 0 < config.thinking_budget < config.max_tokens
            if extended:
                assert 4096 <= config.max_tokens <= 16000
            else:
                assert 256 <= config.max_tokens <= 8192


# ---------------------------------------------------------------------------
# ResponseLengthConfig
# ---------------------------------------------------------------------------


class TestResponseLengthConfig:
    """Tests for the response length model invariant."""

    def _analysis(self):
        return QueryAnalysis(type=QueryType.SIMPLE, requires_detail=False, estimated_complexity=0.1)

    def test_valid(self):
        """Verify a budget below the ceiling is accepted."""
        config = ResponseLengthConfig(
            max_tokens=1024,
            thinking_budget=512,
            profile=ResponseProfile.CONCISE,
            analysis=self._analysis(),
        )
        assert config.thinking_budget == 512

    def test_budget_equal_rejected(self):
        """Verify a budget equal to the ceiling is rejected."""
        with pytest.raises(ValidationError):
            ResponseLengthConfig(
                max_tokens=1024,
                thinking_budget=1024,
                profile=ResponseProfile.CONCISE,
                analysis=self._analysis(),
            )

    def test_frozen(self):
        """Verify configs are immutable."""
        config = get_response_length_config("Is it up?")
        with pytest.raises(ValidationError):
            config.max_tokens = 1
