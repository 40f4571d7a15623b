"""Tests for the route validation and health-scoring engine.

Tests:
1. Route parsing (first-comma split, format errors)
2. Provider catalog lookup
3. Per-slot classification precedence
4. Aggregation across the five slots
5. Health score formula and tiers
6. Recommendations and the JSON report
"""

import json

import pytest

from ccr_model_manager.routing import (
    ROUTE_SLOTS,
    AggregateStats,
    HealthTier,
    Provider,
    ProviderCatalog,
    RawRoute,
    RouteFormatError,
    RouteSlot,
    RouteStatus,
    analyze_routes,
    build_report,
    classify_routes,
    health_tier,
    parse_route,
    recommend,
    score_health,
    validate_route,
)


# ── Fixtures ──────────────────────────────────────────────────

@pytest.fixture
def acme():
    return Provider(name="acme", models=("gpt-4", "gpt-3.5"))


@pytest.fixture
def catalog(acme):
    return ProviderCatalog([acme])


@pytest.fixture
def deprecated_catalog():
    return ProviderCatalog([Provider(name="acme", models=("gpt-4", "gpt-3.5"), deprecated=True)])


def all_slots(value):
    return [RawRoute(slot, value) for slot in ROUTE_SLOTS]


# ═══════════════════════════════════════════════════════════════
# 1. ROUTE PARSER
# ═══════════════════════════════════════════════════════════════

class TestRouteParser:
    """Splitting "provider,model" strings."""

    def test_simple_split(self):
        parsed = parse_route("acme,gpt-4")
        assert parsed.provider_name == "acme"
        assert parsed.model_name == "gpt-4"

    def test_model_keeps_extra_commas(self):
        """Everything after the first comma belongs to the model."""
        parsed = parse_route("openrouter,anthropic/claude-3,with,comma")
        assert parsed.provider_name == "openrouter"
        assert parsed.model_name == "anthropic/claude-3,with,comma"

    @pytest.mark.parametrize("raw", ["acme", "", "acme-gpt-4", "provider model"])
    def test_no_comma_is_format_error(self, raw):
        with pytest.raises(RouteFormatError):
            parse_route(raw)

    @pytest.mark.parametrize("raw", [",gpt-4", "acme,", ","])
    def test_empty_side_is_format_error(self, raw):
        with pytest.raises(RouteFormatError) as exc_info:
            parse_route(raw)
        assert exc_info.value.raw == raw

    def test_no_trimming(self):
        parsed = parse_route(" acme , gpt-4")
        assert parsed.provider_name == " acme "
        assert parsed.model_name == " gpt-4"

    def test_str_roundtrip(self):
        assert str(parse_route("a,b,c")) == "a,b,c"


# ═══════════════════════════════════════════════════════════════
# 2. PROVIDER CATALOG
# ═══════════════════════════════════════════════════════════════

class TestProviderCatalog:
    """Read-only lookup over providers."""

    def test_exact_match(self, catalog, acme):
        assert catalog.find_by_name("acme") is acme

    def test_case_sensitive(self, catalog):
        assert catalog.find_by_name("ACME") is None
        assert catalog.find_by_name("acm") is None

    def test_first_duplicate_wins(self):
        first = Provider(name="dup", models=("a",))
        second = Provider(name="dup", models=("b",))
        catalog = ProviderCatalog([first, second])
        assert catalog.find_by_name("dup") is first
        assert catalog.all() == (first, second)

    def test_active_filters_deprecated(self):
        live = Provider(name="live")
        old = Provider(name="old", deprecated=True)
        catalog = ProviderCatalog([old, live])
        assert catalog.active() == (live,)

    def test_empty_catalog(self):
        catalog = ProviderCatalog()
        assert len(catalog) == 0
        assert catalog.find_by_name("anything") is None

    def test_search_matches_providers_and_models(self):
        catalog = ProviderCatalog([
            Provider(name="OpenRouter", models=("anthropic/claude-3.5-sonnet", "gpt-4o")),
            Provider(name="deepseek", models=("deepseek-chat",)),
        ])
        providers, models = catalog.search("DEEP")
        assert [p.name for p in providers] == ["deepseek"]
        assert [(p.name, m) for p, m in models] == [("deepseek", "deepseek-chat")]

        providers, models = catalog.search("claude")
        assert providers == []
        assert models[0][1] == "anthropic/claude-3.5-sonnet"


# ═══════════════════════════════════════════════════════════════
# 3. ROUTE VALIDATOR
# ═══════════════════════════════════════════════════════════════

class TestRouteValidator:
    """Classification precedence for a single slot."""

    @pytest.mark.parametrize("value", [None, ""])
    def test_not_configured(self, catalog, value):
        result = validate_route(RawRoute(RouteSlot.DEFAULT, value), catalog)
        assert result.status is RouteStatus.NOT_CONFIGURED
        assert result.provider_name is None
        assert not result.is_configured

    def test_format_error_carries_parser_message(self, catalog):
        result = validate_route(RawRoute(RouteSlot.THINK, "acme"), catalog)
        assert result.status is RouteStatus.FORMAT_ERROR
        assert "provider,model" in result.error
        assert result.provider_name is None

    def test_provider_not_found_keeps_names(self, catalog):
        result = validate_route(RawRoute(RouteSlot.THINK, "other,gpt-4"), catalog)
        assert result.status is RouteStatus.PROVIDER_NOT_FOUND
        assert result.provider_name == "other"
        assert result.model_name == "gpt-4"
        assert result.error

    def test_deprecated_outranks_unknown_model(self, deprecated_catalog):
        """A deprecated provider is reported even if the model is also unknown."""
        result = validate_route(RawRoute(RouteSlot.DEFAULT, "acme,gpt-9"), deprecated_catalog)
        assert result.status is RouteStatus.DEPRECATED_PROVIDER
        assert result.model_name == "gpt-9"

    def test_unknown_model(self, catalog):
        result = validate_route(RawRoute(RouteSlot.DEFAULT, "acme,gpt-9"), catalog)
        assert result.status is RouteStatus.UNKNOWN_MODEL
        assert result.provider_name == "acme"

    def test_model_match_is_exact(self, catalog):
        result = validate_route(RawRoute(RouteSlot.DEFAULT, "acme,GPT-4"), catalog)
        assert result.status is RouteStatus.UNKNOWN_MODEL

    def test_active(self, catalog):
        result = validate_route(RawRoute(RouteSlot.WEB_SEARCH, "acme,gpt-3.5"), catalog)
        assert result.status is RouteStatus.ACTIVE
        assert result.error is None
        assert result.to_dict() == {
            "type": "webSearch",
            "status": "active",
            "provider": "acme",
            "model": "gpt-3.5",
            "error": None,
        }

    def test_provider_with_empty_model_list(self):
        catalog = ProviderCatalog([Provider(name="bare")])
        result = validate_route(RawRoute(RouteSlot.DEFAULT, "bare,x"), catalog)
        assert result.status is RouteStatus.UNKNOWN_MODEL


# ═══════════════════════════════════════════════════════════════
# 4. AGGREGATE ANALYZER
# ═══════════════════════════════════════════════════════════════

class TestAggregateAnalyzer:
    """Counters across the five slots."""

    def test_slot_order_is_fixed(self, catalog):
        reversed_routes = list(reversed(all_slots("acme,gpt-4")))
        results = classify_routes(reversed_routes, catalog)
        assert [r.slot for r in results] == list(ROUTE_SLOTS)

    def test_accepts_mapping(self, catalog):
        stats = analyze_routes({"default": "acme,gpt-4", "longContext": "acme,gpt-3.5",
                                "unrelated": "x,y"}, catalog)
        assert stats.total_slots == 5
        assert stats.configured_slots == 2

    def test_missing_slots_are_unconfigured(self, catalog):
        results = classify_routes([RawRoute(RouteSlot.THINK, "acme,gpt-4")], catalog)
        assert len(results) == 5
        statuses = {r.slot: r.status for r in results}
        assert statuses[RouteSlot.THINK] is RouteStatus.ACTIVE
        assert statuses[RouteSlot.DEFAULT] is RouteStatus.NOT_CONFIGURED

    def test_provider_not_found_counts_as_format_error(self, catalog):
        stats = analyze_routes(
            [RawRoute(RouteSlot.DEFAULT, "ghost,m"), RawRoute(RouteSlot.THINK, "bad")],
            catalog,
        )
        assert stats.format_error_hits == 2
        assert stats.configured_slots == 2

    def test_active_providers_are_distinct(self):
        catalog = ProviderCatalog([
            Provider(name="a", models=("m",)),
            Provider(name="b", models=("m",)),
            Provider(name="old", models=("m",), deprecated=True),
        ])
        stats = analyze_routes({
            "default": "a,m",
            "background": "a,m",
            "think": "b,unknown",  # unknown model still counts its provider
            "longContext": "old,m",
            "webSearch": "ghost,m",
        }, catalog)
        assert stats.active_provider_count == 2
        assert stats.referenced_provider_count == 3
        assert stats.deprecated_provider_hits == 1
        assert stats.unknown_model_hits == 1
        assert stats.format_error_hits == 1

    def test_idempotent(self, catalog):
        routes = all_slots("acme,gpt-4")
        assert analyze_routes(routes, catalog) == analyze_routes(routes, catalog)

    def test_empty_catalog_never_fails(self):
        stats = analyze_routes(all_slots("acme,gpt-4"), ProviderCatalog())
        assert stats.configured_slots == 5
        assert stats.format_error_hits == 5
        assert score_health(stats) == 0


# ═══════════════════════════════════════════════════════════════
# 5. HEALTH SCORER: concrete scenarios
# ═══════════════════════════════════════════════════════════════

class TestHealthScenarios:
    """Five slots, catalog with acme: [gpt-4, gpt-3.5]."""

    def test_all_active(self, catalog):
        stats = analyze_routes(all_slots("acme,gpt-4"), catalog)
        assert stats == AggregateStats(
            total_slots=5, configured_slots=5, active_provider_count=1,
            deprecated_provider_hits=0, unknown_model_hits=0, format_error_hits=0,
            referenced_provider_count=1,
        )
        assert score_health(stats) == 100

    def test_all_absent(self, catalog):
        stats = analyze_routes(all_slots(None), catalog)
        assert stats.configured_slots == 0
        assert score_health(stats) == 0

    def test_all_deprecated(self, deprecated_catalog):
        stats = analyze_routes(all_slots("acme,gpt-4"), deprecated_catalog)
        assert stats.deprecated_provider_hits == 5
        assert stats.active_provider_count == 0
        assert score_health(stats) == 45

    def test_all_unknown_model(self, catalog):
        stats = analyze_routes(all_slots("acme,gpt-9"), catalog)
        assert stats.unknown_model_hits == 5
        assert stats.active_provider_count == 1
        assert score_health(stats) == 65

    def test_single_format_error(self, catalog):
        stats = analyze_routes([RawRoute(RouteSlot.DEFAULT, "acme")], catalog)
        assert stats.configured_slots == 1
        assert stats.format_error_hits == 1
        assert score_health(stats) == 0


class TestHealthScorer:
    """Formula properties."""

    def test_stats_without_referenced_count(self):
        """Hand-built stats assume every referenced provider is active."""
        stats = AggregateStats(configured_slots=5, active_provider_count=1)
        assert score_health(stats) == 100

    def test_zero_total_slots(self):
        assert score_health(AggregateStats(total_slots=0)) == 0

    def test_clamped_to_range(self):
        worst = AggregateStats(configured_slots=5, format_error_hits=5,
                               deprecated_provider_hits=5, unknown_model_hits=5)
        assert score_health(worst) == 0
        oversized = AggregateStats(total_slots=1, configured_slots=5, active_provider_count=5)
        assert score_health(oversized) == 100

    def test_rounds_half_up(self):
        # 20 + 30 + 10 - 3 = 57
        stats = AggregateStats(configured_slots=2, active_provider_count=1,
                               unknown_model_hits=1, referenced_provider_count=1)
        assert score_health(stats) == 57
        # 10 + 15 + 20 = 45
        stats = AggregateStats(configured_slots=1, active_provider_count=1,
                               referenced_provider_count=2)
        assert score_health(stats) == 45
        # 40 + 30 + 13.33 - 3 - 10 = 70.33
        stats = AggregateStats(configured_slots=4, active_provider_count=1,
                               referenced_provider_count=1, format_error_hits=1,
                               unknown_model_hits=1)
        assert score_health(stats) == 70

    def test_half_point_rounds_up(self):
        # 10 + 7.5 + 20 = 37.5
        stats = AggregateStats(configured_slots=1, active_provider_count=1,
                               referenced_provider_count=4)
        assert score_health(stats) == 38

    def test_adding_active_slot_never_lowers_score(self, catalog):
        previous = -1
        for count in range(6):
            routes = [RawRoute(slot, "acme,gpt-4") for slot in ROUTE_SLOTS[:count]]
            score = score_health(analyze_routes(routes, catalog))
            assert score >= previous
            previous = score

    @pytest.mark.parametrize("score,tier", [
        (100, HealthTier.EXCELLENT),
        (90, HealthTier.EXCELLENT),
        (89, HealthTier.GOOD),
        (70, HealthTier.GOOD),
        (69, HealthTier.FAIR),
        (50, HealthTier.FAIR),
        (49, HealthTier.POOR),
        (0, HealthTier.POOR),
    ])
    def test_tiers(self, score, tier):
        assert health_tier(score) is tier


# ═══════════════════════════════════════════════════════════════
# 6. RECOMMENDATIONS & REPORT
# ═══════════════════════════════════════════════════════════════

class TestRecommendations:
    """Ordered, independently gated rules."""

    def test_healthy_config_only_closing_and_redundancy(self):
        stats = AggregateStats(configured_slots=5, active_provider_count=1,
                               referenced_provider_count=1)
        messages = recommend(stats, 100)
        assert len(messages) == 2
        assert "redundancy" in messages[0]
        assert "excellent" in messages[-1]

    def test_all_rules_fire_in_order(self):
        stats = AggregateStats(configured_slots=4, deprecated_provider_hits=1,
                               unknown_model_hits=1, format_error_hits=1,
                               active_provider_count=0)
        messages = recommend(stats, 10)
        assert len(messages) == 6
        assert "Configure all route slots" in messages[0]
        assert "deprecated" in messages[1]
        assert "models" in messages[2]
        assert "malformed" in messages[3]
        assert "active" in messages[4]
        assert "poor" in messages[5]

    def test_no_redundancy_hint_for_two_slots(self):
        stats = AggregateStats(configured_slots=2, active_provider_count=1)
        messages = recommend(stats, 60)
        assert not any("redundancy" in m for m in messages)

    def test_exactly_one_closing_message(self):
        stats = AggregateStats(configured_slots=5, active_provider_count=2)
        for score in (95, 75, 55, 5):
            messages = recommend(stats, score)
            closings = [m for m in messages if m.startswith("Routing configuration is")]
            assert len(closings) == 1
            assert closings[0] == messages[-1]

    def test_idempotent(self):
        stats = AggregateStats(configured_slots=3)
        assert recommend(stats, 40) == recommend(stats, 40)


class TestReport:
    """Bundled report and JSON export."""

    def test_export_shape(self, catalog):
        report = build_report({"default": "acme,gpt-4", "think": "acme"}, catalog)
        data = report.to_dict()

        assert data["summary"] == {
            "totalRouters": 5,
            "configuredRouters": 2,
            "activeProviders": 1,
            "healthScore": report.score,
            "healthStatus": report.tier.value,
        }
        assert [r["type"] for r in data["routers"]] == [
            "default", "background", "think", "longContext", "webSearch"]
        assert data["routers"][2]["status"] == "format_error"
        assert data["statistics"]["formatErrorHits"] == 1
        assert set(data["statistics"]) == {
            "totalSlots", "configuredSlots", "activeProviderCount",
            "deprecatedProviderHits", "unknownModelHits", "formatErrorHits"}
        assert data["recommendations"] == report.recommendations
        json.dumps(data)

    def test_status_label_matches_closing_message(self, catalog):
        report = build_report(all_slots("acme,gpt-4"), catalog)
        assert report.score == 100
        assert report.tier is HealthTier.EXCELLENT
        assert report.tier.value in report.recommendations[-1]
