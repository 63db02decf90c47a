"""
Tests for the format parsers.

Usage:
    pytest tests/test_parsers.py -v
"""

import json

import pytest

from case_assets.parsers.csv_parser import csv_to_records, looks_like_csv, parse_csv, parse_csv_line
from case_assets.parsers.json_recovery import DEFAULT_RECOVERIES, load_json, strip_code_fences, unwrap_quoted
from case_assets.parsers.org_chart import extract_org_nodes, parse_org_chart
from case_assets.parsers.record_table import format_cell, humanize_header, parse_record_table
from case_assets.parsers.slide_deck import parse_slide_deck
from case_assets.parsers.sql_parser import parse_sql_inserts
from case_assets.parsers.stakeholders import parse_stakeholders
from case_assets.parsers.time_series import parse_time_series


# ============================================================================
# CSV
# ============================================================================

class TestCsvParser:

    def test_quoted_field_keeps_embedded_comma(self):
        table = parse_csv('Name,Revenue\n"Acme, Inc.",100\nBeta,200')

        assert table.headers == ["Name", "Revenue"]
        assert table.rows[0] == ["Acme, Inc.", "100"]
        assert len(table.rows) == 2
        assert all(len(row) == len(table.headers) for row in table.rows)

    def test_doubled_quote_is_literal(self):
        assert parse_csv_line('a,"say ""hi""",c') == ["a", 'say "hi"', "c"]

    def test_fields_are_trimmed(self):
        assert parse_csv_line(" a ,  b,c ") == ["a", "b", "c"]

    def test_blank_lines_are_skipped(self):
        table = parse_csv("a,b\n\n1,2\n   \n3,4\n")
        assert table.rows == [["1", "2"], ["3", "4"]]

    def test_no_content_lines_is_not_csv(self):
        assert parse_csv("  \n \n") is None
        assert parse_csv(None) is None

    def test_records_fill_missing_fields(self):
        assert csv_to_records("a,b,c\n1,2") == [{"a": "1", "b": "2", "c": ""}]

    def test_looks_like_csv(self):
        assert looks_like_csv("a,b\n1,2")
        assert not looks_like_csv("a,b")
        assert not looks_like_csv("one\ntwo")


# ============================================================================
# SQL
# ============================================================================

class TestSqlParser:

    def test_one_row_per_insert_statement(self):
        sql = "INSERT INTO t (a,b) VALUES (1,'x');\nINSERT INTO t (a,b) VALUES (2,'y');"
        table = parse_sql_inserts(sql)

        assert table.headers == ["a", "b"]
        assert table.rows == [["1", "x"], ["2", "y"]]
        assert table.title == "Data Table"

    def test_null_quotes_and_quoted_columns(self):
        sql = "INSERT INTO `users` (`id`, \"name\") VALUES (1, NULL), (2, 'O''Brien');"
        table = parse_sql_inserts(sql)

        assert table.headers == ["id", "name"]
        assert table.rows == [["1", None], ["2", "O'Brien"]]

    def test_comma_inside_string_literal(self):
        table = parse_sql_inserts("INSERT INTO deals (name, value) VALUES ('Acme, Inc.', 10);")
        assert table.rows == [["Acme, Inc.", "10"]]

    def test_parentheses_inside_string_literal(self):
        table = parse_sql_inserts("INSERT INTO t (a,b) VALUES (1,'Acme (US)'), (2, 'x)y');")
        assert table.rows == [["1", "Acme (US)"], ["2", "x)y"]]

    def test_function_call_value_keeps_its_parentheses(self):
        table = parse_sql_inserts("INSERT INTO t (a,b) VALUES (1, NOW());")
        assert table.rows == [["1", "NOW()"]]

    def test_select_only_dump_is_not_tabular(self):
        assert parse_sql_inserts("SELECT * FROM revenue WHERE year = 2024;") is None
        assert parse_sql_inserts("") is None


# ============================================================================
# JSON record table and cell formatting
# ============================================================================

class TestRecordTable:

    def test_bare_array(self):
        table = parse_record_table('[{"region": "EU", "revenue": 10}, {"region": "US", "revenue": 20}]')

        assert table.headers == ["region", "revenue"]
        assert table.title == "Data Sheet"
        assert table.cell(1, "revenue") == 20

    def test_envelope_with_metadata(self):
        table = parse_record_table(json.dumps({
            "name": "Regional Sales",
            "description": "FY24 by region",
            "units": {"revenue": "USD Millions"},
            "rows": [{"region": "EU", "revenue": 2500000}],
        }))

        assert table.title == "Regional Sales"
        assert table.description == "FY24 by region"
        assert table.units == {"revenue": "USD Millions"}

    def test_csv_string_inside_data(self):
        table = parse_record_table(json.dumps({"title": "Sheet", "data": "a,b\n1,2"}))

        assert table.title == "Sheet"
        assert table.headers == ["a", "b"]
        assert table.rows == [{"a": "1", "b": "2"}]

    @pytest.mark.parametrize("content", ["{not json", '{"data": []}', "[1, 2]", "[{}]", '"text"'])
    def test_no_rows_is_not_a_table(self, content):
        assert parse_record_table(content) is None

    def test_format_cell_units(self):
        assert format_cell("2500000", "USD Millions") == "USD 2.50M"
        assert format_cell(1234.5, "USD") == "USD 1,234.5"
        assert format_cell(1234, "EUR") == "EUR 1,234"
        assert format_cell(12.5, "Percentage") == "12.5%"
        assert format_cell("abc", "USD") == "abc"

    def test_format_cell_plain_values(self):
        assert format_cell(None) == "—"
        assert format_cell("") == "—"
        assert format_cell(True) == "true"
        assert format_cell({"a": 1}) == '{"a": 1}'
        assert format_cell(7) == "7"

    def test_humanize_header(self):
        assert humanize_header("revenue_growth") == "Revenue Growth"
        assert humanize_header("yoy_growth_pct") == "Yoy Growth Pct"


# ============================================================================
# Org chart and stakeholders
# ============================================================================

class TestOrgChart:

    def test_single_root_node(self):
        parsed = parse_org_chart('{"root": {"name": "CEO", "children": [{"name": "CFO"}]}}')

        assert len(parsed.records) == 1
        assert parsed.records[0]["name"] == "CEO"

    @pytest.mark.parametrize("document, expected", [
        ([{"name": "A"}, {"name": "B"}], 2),
        ({"organization": [{"name": "A"}]}, 1),
        ({"topLevel": [{"name": "A"}, {"name": "B"}]}, 2),
        ({"ceo": {"name": "A"}}, 1),
        ({"employees": [{"name": "A"}]}, 1),
        ({"departments": [{"name": "Ops"}, {"name": "HR"}]}, 2),
        ({"name": "Solo"}, 1),
        ({"title": "Org", "summary": "Nothing listed"}, 0),
    ])
    def test_document_shapes(self, document, expected):
        assert len(extract_org_nodes(document)) == expected

    def test_metadata(self):
        parsed = parse_org_chart(json.dumps({
            "title": "Post-reorg structure",
            "summary": "Two-pizza teams",
            "keyTakeaways": ["Flatter"],
            "organization": [{"name": "CEO"}],
        }))

        assert parsed.title == "Post-reorg structure"
        assert parsed.summary == "Two-pizza teams"
        assert parsed.key_takeaways == ["Flatter"]

    def test_invalid_json(self):
        assert parse_org_chart("{oops") is None

    def test_fenced_json_is_not_recovered(self):
        assert parse_org_chart('```json\n[{"name": "A"}]\n```') is None


class TestStakeholders:

    def test_code_fences_are_stripped(self):
        parsed = parse_stakeholders('```json\n[{"name": "Ana", "influence": "high"}]\n```')
        assert parsed.records == [{"name": "Ana", "influence": "high"}]

    def test_enclosing_quotes_are_stripped(self):
        parsed = parse_stakeholders("'{\"stakeholders\": [{\"name\": \"Bo\"}]}'")
        assert parsed.records == [{"name": "Bo"}]

    def test_profiles_key_and_single_object(self):
        assert len(parse_stakeholders('{"profiles": [{"name": "A"}, {"name": "B"}]}').records) == 2
        assert parse_stakeholders('{"name": "Only"}').records == [{"name": "Only"}]

    def test_unrecoverable(self):
        assert parse_stakeholders("Ana is the CFO.") is None


class TestJsonRecovery:

    def test_transforms(self):
        assert strip_code_fences("```\n{}\n```") == "{}"
        assert strip_code_fences("{}") is None
        assert unwrap_quoted("'[1]'") == "[1]"
        assert unwrap_quoted("[1]") is None

    def test_raw_text_wins(self):
        assert load_json(' {"a": 1} ', DEFAULT_RECOVERIES) == (True, {"a": 1})

    def test_gives_up(self):
        assert load_json("nope", DEFAULT_RECOVERIES) == (False, None)
        assert load_json(None) == (False, None)


# ============================================================================
# Time series
# ============================================================================

class TestTimeSeries:

    def test_several_series_draw_bars(self):
        parsed = parse_time_series(json.dumps({
            "title": "Market share",
            "data": [
                {"month": "Jan", "revenue": 10, "share": 0.2},
                {"month": "Feb", "revenue": 12, "share": 0.25},
            ],
        }))

        assert parsed.time_key == "month"
        assert parsed.series_keys == ["revenue", "share"]
        assert parsed.chart_type == "bar"
        assert parsed.title == "Market share"

    def test_one_series_draws_a_line(self):
        parsed = parse_time_series('[{"year": 2023, "flag": true, "value": 3}, {"year": 2024, "value": 4}]')

        assert parsed.time_key == "year"
        assert parsed.series_keys == ["value"]
        assert parsed.chart_type == "line"

    def test_default_time_key(self):
        parsed = parse_time_series('{"values": [{"label": "Q1", "units": 5}]}')
        assert parsed.time_key == "period"
        assert parsed.series_keys == ["units"]

    @pytest.mark.parametrize("content", [
        '[{"period": "Q1", "note": "flat"}]',
        '{"data": []}',
        '{"summary": "no points"}',
        "not json",
    ])
    def test_nothing_to_plot(self, content):
        assert parse_time_series(content) is None


# ============================================================================
# Slide deck
# ============================================================================

class TestSlideDeck:

    def test_no_markers_gives_one_slide(self):
        content = "  # Board update\n\nRevenue is up.\n\nHeadcount is flat.  "
        deck = parse_slide_deck(content)

        assert len(deck.slides) == 1
        assert deck.slides[0].body == content.strip()
        assert deck.has_frontmatter is False
        assert deck.has_separators is False
        assert deck.format_warning == "Missing deck frontmatter and slide separators."

    def test_frontmatter_separators_and_notes(self):
        content = (
            "---\ntheme: default\npaginate: true\n---\n"
            "# Intro\n<!-- Speaker note here -->\n\n---\n\n"
            "# Plan\n<!-- _class: lead -->\nDetails"
        )
        deck = parse_slide_deck(content)

        assert deck.directives == {"theme": "default", "paginate": True}
        assert deck.format_warning is None
        assert [s.title for s in deck.slides] == ["Intro", "Plan"]
        assert deck.slides[0].notes == ["Speaker note here"]
        assert deck.slides[1].directives == {"_class": "lead"}

    def test_separators_without_frontmatter(self):
        deck = parse_slide_deck("# A\n---\n# B")

        assert len(deck.slides) == 2
        assert deck.format_warning == "Missing deck frontmatter."

    def test_unreadable_frontmatter(self):
        deck = parse_slide_deck("---\ntheme: [unclosed\n---\n# A\n---\n# B")

        assert deck.has_frontmatter is True
        assert deck.directives == {}
        assert len(deck.slides) == 2
