import logging

from nursenotes.concept_map.extractor import (
    extract_concept_maps,
    extract_concept_maps_from_html,
    heading_title,
    parse_record,
)


class TestParseRecord:
    def test_missing_fields_default_to_empty(self):
        record = parse_record('{"central": "Croup", "medications": ["Dexamethasone"]}')

        assert record.central == "Croup"
        assert record.items("medications") == ["Dexamethasone"]
        assert record.items("riskFactors") == []
        assert record.items("patientEducation") == []

    def test_null_field_is_empty(self):
        record = parse_record('{"central": "RSV", "causes": null, "treatments": ["Suction"]}')

        assert record.causes == []
        assert record.treatments == ["Suction"]

    def test_html_entities_are_undone(self):
        record = parse_record("{&quot;central&quot;: &quot;A &amp; B&quot;, &quot;causes&quot;: [&quot;x&quot;]}")

        assert record.central == "A & B"

    def test_surrounding_text_is_ignored(self):
        record = parse_record('json\n{"central": "Asthma", "diagnostics": ["PEF"]}\ntrailing')

        assert record.central == "Asthma"

    def test_malformed_json_returns_none(self, caplog):
        with caplog.at_level(logging.WARNING):
            assert parse_record('{"central": "Croup", "causes": [') is None
        assert "malformed" in caplog.text

    def test_requires_central(self):
        assert parse_record('{"pathophysiology": ["x"]}') is None

    def test_requires_a_recognized_field(self):
        assert parse_record('{"central": "Croup", "notes": ["x"]}') is None
        assert parse_record('{"central": "Croup", "causes": null}') is None

    def test_schema_mismatch_returns_none(self):
        assert parse_record('{"central": "Croup", "causes": [1, 2]}') is None
        assert parse_record('{"central": 5, "causes": ["x"]}') is None

    def test_plain_code_is_not_a_record(self):
        assert parse_record("print('hello')") is None


def test_heading_title():
    assert heading_title("Concept Map: Croup") == "Croup"
    assert heading_title("Concept Map Asthma") == "Asthma"
    assert heading_title("concept map: RSV") == "RSV"
    assert heading_title("Concept Maps") is None
    assert heading_title("Overview") is None


class TestExtractMarkdown:
    def test_headed_blocks_keep_document_order(self):
        md = (
            "### Concept Map: Croup\n"
            "```json\n{\"central\": \"Croup\", \"causes\": [\"Parainfluenza\"]}\n```\n\n"
            "### Concept Map: RSV\n"
            "```json\n{\"central\": \"RSV\", \"causes\": [\"Respiratory syncytial virus\"]}\n```\n"
        )
        matches = list(extract_concept_maps(md))

        assert [m.title for m in matches] == ["Croup", "RSV"]
        assert matches[0].record.causes == ["Parainfluenza"]
        assert matches[1].record.causes == ["Respiratory syncytial virus"]

    def test_any_heading_level_is_accepted(self):
        md = "## Concept Map: Sepsis\n```json\n{\"central\": \"Sepsis\", \"treatments\": [\"Fluids\"]}\n```\n"

        assert [m.title for m in extract_concept_maps(md)] == ["Sepsis"]

    def test_title_drops_inline_markup(self):
        md = "### Concept Map: **Croup** and `RSV`\n```json\n{\"central\": \"Croup\", \"causes\": [\"x\"]}\n```\n"

        assert [m.title for m in extract_concept_maps(md)] == ["Croup and RSV"]

    def test_fallback_finds_blocks_nested_in_lists(self):
        md = (
            "- Croup overview:\n\n"
            "  ```json\n"
            "  {\"central\": \"Croup\", \"causes\": [\"Parainfluenza\"]}\n"
            "  ```\n"
        )
        matches = list(extract_concept_maps(md))

        assert [m.title for m in matches] == ["Croup"]
        assert matches[0].heading is None

    def test_heading_without_block_is_skipped(self):
        md = (
            "### Concept Map: Empty\n\nNothing here.\n\n"
            "## Next\n```json\n{\"central\": \"Loose\", \"causes\": [\"x\"]}\n```\n"
        )
        matches = list(extract_concept_maps(md))

        # the headed pass found nothing, so the fallback picks up the loose block
        assert [m.title for m in matches] == ["Loose"]
        assert matches[0].heading is None

    def test_fallback_titles_by_central(self):
        md = "Intro\n\n```json\n{\"central\": \"Heart Failure\", \"medications\": [\"Furosemide\"]}\n```\n"
        matches = list(extract_concept_maps(md))

        assert len(matches) == 1
        assert matches[0].title == "Heart Failure"

    def test_fallback_not_used_when_headed_maps_exist(self):
        md = (
            "### Concept Map: Croup\n```json\n{\"central\": \"Croup\", \"causes\": [\"x\"]}\n```\n\n"
            "## Other\n```json\n{\"central\": \"Other\", \"causes\": [\"y\"]}\n```\n"
        )

        assert [m.title for m in extract_concept_maps(md)] == ["Croup"]

    def test_malformed_block_yields_nothing(self):
        md = "### Concept Map: Broken\n```json\n{\"central\": \"Broken\", \"causes\": [\n```\n"

        assert list(extract_concept_maps(md)) == []

    def test_empty_title_falls_back_to_central(self):
        md = "### Concept Map:\n```json\n{\"central\": \"DKA\", \"diagnostics\": [\"ABG\"]}\n```\n"

        assert [m.title for m in extract_concept_maps(md)] == ["DKA"]


class TestExtractHtml:
    def test_headed_code_blocks(self):
        html = (
            "<h3>Concept Map: Croup</h3>\n"
            '<pre><code class="language-json">{&quot;central&quot;: &quot;Croup&quot;, '
            "&quot;medications&quot;: [&quot;Dexamethasone&quot;]}</code></pre>\n"
            "<h3>Concept Map: RSV</h3>\n"
            '<pre><code>{"central": "RSV", "causes": ["Virus"]}</code></pre>'
        )
        matches = list(extract_concept_maps_from_html(html))

        assert [m.title for m in matches] == ["Croup", "RSV"]
        assert matches[0].record.medications == ["Dexamethasone"]

    def test_legacy_blocks_without_headings(self):
        html = '<p>x</p><pre><code>{"central": "Asthma", "pathophysiology": ["Bronchospasm"]}</code></pre>'
        matches = list(extract_concept_maps_from_html(html))

        assert [m.title for m in matches] == ["Asthma"]
