"""Analysis parser tests — JSON extraction, schema validation, field normalisation."""

import os
import sys

# Ensure the backend package is importable
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import json

import pytest

from marketpulse.services.analysis_parser import parse_market_analysis, sanitize_json
from marketpulse.services.errors import AnalysisParseError


def _reply(competitors, summary=None):
    return json.dumps(
        {
            "summary": summary if summary is not None else ["Two tools found"],
            "competitors_details": competitors,
        }
    )


class TestSanitizeJson:
    def test_strips_markdown_fence(self):
        raw = '```json\n{"a": 1}\n```'
        assert json.loads(sanitize_json(raw)) == {"a": 1}

    def test_strips_surrounding_prose_and_trailing_commas(self):
        raw = 'Here you go: {"a": [1, 2,], "b": 3,} Hope that helps!'
        assert json.loads(sanitize_json(raw)) == {"a": [1, 2], "b": 3}

    def test_commas_inside_strings_preserved(self):
        raw = '{"key_features": ["Exports to [mp4, ]", "Says \\"hi, }\\"",],}'
        assert json.loads(sanitize_json(raw)) == {
            "key_features": ["Exports to [mp4, ]", 'Says "hi, }"'],
        }

    def test_no_object_raises(self):
        with pytest.raises(AnalysisParseError):
            sanitize_json("not json")


class TestParseMarketAnalysis:
    def test_valid_reply(self):
        analysis = parse_market_analysis(
            _reply(
                [
                    {
                        "name": "Synthesia",
                        "website_url": "https://www.synthesia.io/",
                        "key_features": ["AI avatars", "120+ languages"],
                        "pricing_model": ["$22/month"],
                    }
                ]
            )
        )
        competitor = analysis.competitors_details[0]
        assert analysis.summary == ["Two tools found"]
        assert competitor.name == "Synthesia"
        assert competitor.website_url == "https://www.synthesia.io/"
        assert competitor.key_features == ["AI avatars", "120+ languages"]
        assert competitor.pricing_model == ["$22/month"]
        assert competitor.tech_stack is None

    def test_bare_strings_become_single_item_lists(self):
        analysis = parse_market_analysis(
            _reply(
                [{"name": "Loom", "key_features": "Screen recording", "target_market": "Remote teams"}],
                summary="One tool found",
            )
        )
        competitor = analysis.competitors_details[0]
        assert analysis.summary == ["One tool found"]
        assert competitor.key_features == ["Screen recording"]
        assert competitor.target_market == ["Remote teams"]

    def test_null_and_missing_fields(self):
        analysis = parse_market_analysis(
            _reply(
                [
                    {
                        "name": "Hour One",
                        "website_url": None,
                        "key_features": None,
                        "pricing_model": None,
                    },
                    {"name": "Colossyan", "website_url": "  "},
                ]
            )
        )
        first, second = analysis.competitors_details
        assert first.website_url is None
        assert first.key_features == []
        assert first.pricing_model is None
        assert second.key_features == []
        assert second.website_url is None
        assert second.market_positioning is None

    def test_absent_optional_fields_omitted_from_dump(self):
        analysis = parse_market_analysis(_reply([{"name": "Loom", "key_features": []}]))
        dumped = analysis.model_dump(exclude_none=True)
        assert dumped["competitors_details"] == [{"name": "Loom", "key_features": []}]

    def test_not_json(self):
        with pytest.raises(AnalysisParseError):
            parse_market_analysis("not json")

    def test_broken_json(self):
        with pytest.raises(AnalysisParseError):
            parse_market_analysis('{"summary": ["x"], "competitors_details": [}')

    def test_missing_name_fails_schema(self):
        with pytest.raises(AnalysisParseError):
            parse_market_analysis(_reply([{"key_features": ["x"]}]))

    def test_non_string_features_fail_schema(self):
        with pytest.raises(AnalysisParseError):
            parse_market_analysis(_reply([{"name": "Loom", "key_features": [1, 2]}]))

    def test_missing_competitors_fails_schema(self):
        with pytest.raises(AnalysisParseError):
            parse_market_analysis(json.dumps({"summary": ["x"]}))
