from helpcentre.filters import (
    applies_to_country,
    filter_by_country,
    filter_scoped,
    parse_date,
    scope_matches,
    sort_banners,
    sort_by_date_desc,
)


class TestCountryFilter:
    def test_unrestricted_items_match_everywhere(self):
        assert applies_to_country({"id": "a"}, "gb")
        assert applies_to_country({"id": "a", "countries": []}, "gb")

    def test_listed_country_matches_case_insensitively(self):
        assert applies_to_country({"countries": ["GB", "ie"]}, "gb")
        assert applies_to_country({"countries": ["gb"]}, "GB")

    def test_unlisted_country_is_excluded(self):
        assert not applies_to_country({"countries": ["ie"]}, "gb")

    def test_non_objects_pass_through(self):
        assert applies_to_country("plain string", "gb")

    def test_filter_keeps_order(self):
        items = [
            {"id": 1},
            {"id": 2, "countries": ["ie"]},
            {"id": 3, "countries": ["gb"]},
        ]
        assert [i["id"] for i in filter_by_country(items, "gb")] == [1, 3]

    def test_filter_returns_non_lists_unchanged(self):
        assert filter_by_country({"a": 1}, "gb") == {"a": 1}
        assert filter_by_country(None, "gb") is None


class TestScopeMatches:
    def test_missing_scope_is_global(self):
        assert scope_matches({"id": "x"})

    def test_product_scope_needs_matching_product(self):
        record = {"scope": {"type": "product", "productIds": ["payroll"]}}
        assert scope_matches(record, product_id="payroll")
        assert not scope_matches(record, product_id="accounts")
        assert not scope_matches(record)

    def test_topic_scope_needs_product_and_topic(self):
        record = {"scope": {"type": "topic", "productIds": ["payroll"], "topicIds": ["tax"]}}
        assert scope_matches(record, product_id="payroll", topic_id="tax")
        assert not scope_matches(record, product_id="payroll")
        assert not scope_matches(record, product_id="payroll", topic_id="other")

    def test_page_scope_patterns(self):
        record = {"scope": {"type": "page", "pagePatterns": ["/products/:productId/topics"]}}
        assert scope_matches(record, path="/products/payroll/topics")
        assert not scope_matches(record, path="/products/payroll/topics/extra")
        assert not scope_matches(record, path="/products/a/b/topics")
        assert not scope_matches(record)

    def test_page_pattern_is_literal_outside_placeholders(self):
        record = {"scope": {"type": "page", "pagePatterns": ["/search.html"]}}
        assert scope_matches(record, path="/search.html")
        assert not scope_matches(record, path="/searchxhtml")

    def test_unknown_scope_type_never_matches(self):
        assert not scope_matches({"scope": {"type": "weird"}}, product_id="p")


class TestFilterScoped:
    def test_active_only(self):
        records = [{"id": 1, "active": True}, {"id": 2, "active": False}, {"id": 3}]
        assert [r["id"] for r in filter_scoped(records, active_only=True)] == [1]

    def test_skips_non_objects(self):
        assert filter_scoped([{"id": 1}, "junk", None]) == [{"id": 1}]


class TestSortBanners:
    def test_orders_by_state_priority(self):
        banners = [
            {"id": "r", "state": "resolved"},
            {"id": "i", "state": "info"},
            {"id": "e", "state": "error"},
            {"id": "u"},
            {"id": "c", "state": "caution"},
        ]
        assert [b["id"] for b in sort_banners(banners)] == ["e", "c", "i", "r", "u"]


class TestReleaseNoteOrdering:
    def test_newest_first(self):
        notes = [
            {"id": "old", "date": "2023-05-01"},
            {"id": "new", "date": "2024-02-10T09:00:00Z"},
            {"id": "mid", "date": "2023-11-30"},
        ]
        assert [n["id"] for n in sort_by_date_desc(notes)] == ["new", "mid", "old"]

    def test_undated_notes_go_last_in_input_order(self):
        notes = [
            {"id": "x"},
            {"id": "dated", "date": "2024-01-01"},
            {"id": "y", "date": "not a date"},
        ]
        assert [n["id"] for n in sort_by_date_desc(notes)] == ["dated", "x", "y"]

    def test_same_date_keeps_input_order(self):
        notes = [{"id": "a", "date": "2024-01-01"}, {"id": "b", "date": "2024-01-01"}]
        assert [n["id"] for n in sort_by_date_desc(notes)] == ["a", "b"]

    def test_parse_date(self):
        assert parse_date("2024-01-01").year == 2024
        assert parse_date("2024-01-01T10:00:00Z").tzinfo is not None
        assert parse_date("") is None
        assert parse_date(20240101) is None
