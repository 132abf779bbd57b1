"""
Tests for programme entry extraction.

Run with: pytest tests/test_programme_extractor.py -v
"""

import logging
from datetime import datetime, timedelta

import pytest
from dateutil.relativedelta import relativedelta

from src.core.models import ExtractionError, Language, Region
from src.core.vocabulary import labels_for, million_tokens
from src.ingest.programme_extractor import ProgrammeExtractor


WELSH_FACTS = (
    "<dt>Maint yr ariannu:</dt><dd>&#xA3;1 miliwn - &#xA3;5 miliwn</dd>"
    "<dt>Cyfanswm ar gael:</dt><dd>&#xA3;20 miliwn</dd>"
    "<dt>Math o fudiad:</dt><dd>Elusen</dd>"
    "<dt>Ardal:</dt><dd>Cymru</dd>"
)


@pytest.fixture
def extractor():
    return ProgrammeExtractor()


class TestEnglishExtraction:
    """Tests for a well-formed English entry."""

    def test_header_fields(self, extractor, make_entry):
        record = extractor.extract(make_entry(), Language.EN)

        assert record.title == "Awards for All England"
        assert record.slug == "awards-for-all-england"
        assert record.original_link == "https://31.221.8.237/funding/programmes/awards-for-all-england"

    def test_closing_date(self, extractor, make_entry):
        record = extractor.extract(make_entry(), Language.EN)

        assert record.application_deadline == "31 December 2030"
        assert record.expiry_date.date() == datetime(2030, 12, 31).date()

    def test_funding_fields(self, extractor, make_entry):
        record = extractor.extract(make_entry(), Language.EN)

        assert record.minimum == 300
        assert record.maximum == 10_000
        assert record.fund_size_description == "£300 - £10,000"
        assert record.total_available == "£40 million"

    def test_org_type_and_area(self, extractor, make_entry):
        record = extractor.extract(make_entry(), Language.EN)

        assert record.org_type == "Voluntary or community organisation, School, Statutory body"
        assert record.area == Region.ENGLAND

    def test_intro_uses_first_paragraph(self, extractor, make_entry):
        record = extractor.extract(make_entry(), Language.EN)

        assert record.description == "Small grants for community groups & charities."
        assert record.programme_intro == "<p>Small grants for community groups &amp; charities.</p>"

    def test_intro_text_kept_verbatim(self, extractor, make_entry):
        """Intro whitespace is not trimmed."""
        record = extractor.extract(make_entry(intro="  Grants for schools.\n"), Language.EN)

        assert record.description == "  Grants for schools.\n"
        assert record.programme_intro == "<p>  Grants for schools.\n</p>"

    def test_empty_area_list_tagged_uk_wide(self, extractor, make_entry):
        record = extractor.extract(
            make_entry(facts="<dt>Area:</dt><dd><br><br></dd>"), Language.EN
        )
        assert record.area == Region.UK_WIDE

    def test_no_legacy_id_before_aggregation(self, extractor, make_entry):
        assert extractor.extract(make_entry(), Language.EN).legacy_id is None

    def test_absolute_link_kept(self, extractor, make_entry):
        record = extractor.extract(
            make_entry(href="https://other.test/programmes/reaching-communities"), Language.EN
        )
        assert record.original_link == "https://other.test/programmes/reaching-communities"
        assert record.slug == "reaching-communities"

    def test_language_code_accepted(self, extractor, make_entry):
        assert extractor.extract(make_entry(), "en").slug == "awards-for-all-england"


class TestWelshExtraction:
    """Tests for Welsh entries resolved through the Welsh labels."""

    def test_welsh_entry(self, extractor, make_entry):
        fragment = make_entry(
            slug="arian-i-bawb-cymru",
            title="Arian i Bawb Cymru",
            deadline="Terfyn amser ymgeisio: 12 Mawrth 2030",
            facts=WELSH_FACTS,
        )
        record = extractor.extract(fragment, Language.CY)

        assert record.slug == "arian-i-bawb-cymru"
        assert record.application_deadline == "12 Mawrth 2030"
        assert record.expiry_date.date() == datetime(2030, 3, 12).date()
        assert record.minimum == 1_000_000
        assert record.maximum == 5_000_000
        assert record.fund_size_description == "£1 miliwn - £5 miliwn"
        assert record.total_available == "£20 miliwn"
        assert record.org_type == "Elusen"
        assert record.area == Region.WALES

    def test_english_labels_ignored_on_welsh_page(self, extractor, make_entry):
        """Facts are looked up with the page language's labels only."""
        record = extractor.extract(make_entry(), Language.CY)

        assert record.minimum is None
        assert record.area is None
        assert record.org_type is None

    def test_labels_for_language(self):
        assert labels_for(Language.CY).area == "Ardal"
        assert labels_for("en").funding_size == "Funding Size"

    def test_million_tokens(self):
        assert million_tokens() == ["million", "miliwn"]


class TestOptionalFacts:
    """Tests for entries with missing or partial facts."""

    def test_no_key_facts(self, extractor, make_entry):
        record = extractor.extract(make_entry(facts=""), Language.EN)

        assert record.minimum is None
        assert record.maximum is None
        assert record.fund_size_description is None
        assert record.total_available is None
        assert record.org_type is None
        assert record.area is None

    def test_single_funding_value_has_no_bounds(self, extractor, make_entry):
        record = extractor.extract(
            make_entry(facts="<dt>Funding Size:</dt><dd>Up to &#xA3;5,000</dd>"), Language.EN
        )

        assert record.minimum is None
        assert record.maximum is None
        assert record.fund_size_description == "Up to £5,000"

    def test_multiple_areas_tagged_uk_wide(self, extractor, make_entry):
        record = extractor.extract(
            make_entry(facts="<dt>Area:</dt><dd>England<br>Wales<br>Scotland</dd>"), Language.EN
        )
        assert record.area == Region.UK_WIDE

    def test_unparsable_deadline(self, extractor, make_entry):
        record = extractor.extract(
            make_entry(deadline="Application Deadline: Ongoing"), Language.EN
        )

        assert record.application_deadline == "Ongoing"
        expected = datetime.now() - relativedelta(years=1)
        assert abs(record.expiry_date - expected) < timedelta(seconds=5)

    def test_no_intro(self, extractor, make_entry):
        fragment = make_entry().replace('<div class="infoDetailsLeft">', '<div class="other">')
        record = extractor.extract(fragment, Language.EN)

        assert record.description == ""
        assert record.programme_intro == "<p></p>"


class TestExtractionFailures:
    """Tests for malformed entries."""

    def test_missing_header(self, extractor):
        with pytest.raises(ExtractionError):
            extractor.extract('<div class="programmeListItem"><p>Nothing here</p></div>', Language.EN)

    def test_missing_link(self, extractor, make_entry):
        with pytest.raises(ExtractionError, match="link"):
            extractor.extract(make_entry(href=""), Language.EN)

    def test_missing_heading(self, extractor, make_entry):
        fragment = make_entry().replace("<h3>", "<h4>").replace("</h3>", "</h4>")
        with pytest.raises(ExtractionError, match="heading"):
            extractor.extract(fragment, Language.EN)

    def test_link_without_slug(self, extractor, make_entry):
        with pytest.raises(ExtractionError, match="slug"):
            extractor.extract(make_entry(href="/funding/programmes/"), Language.EN)

    def test_extract_result_success(self, extractor, make_entry):
        result = extractor.extract_result(make_entry(), Language.EN, page=3)

        assert result.ok
        assert result.record.slug == "awards-for-all-england"
        assert result.page == 3
        assert result.error is None

    def test_extract_result_failure_is_logged(self, extractor, make_entry, caplog):
        with caplog.at_level(logging.WARNING):
            result = extractor.extract_result(make_entry(href=""), Language.CY, page=1)

        assert not result.ok
        assert result.error_type == "parsing"
        assert result.language == Language.CY
        assert "link" in result.error
        assert any("Skipping programme entry" in r.getMessage() for r in caplog.records)

    def test_extract_result_unexpected_error(self, extractor, make_entry, monkeypatch):
        def broken(*args, **kwargs):
            raise RuntimeError("parser exploded")

        monkeypatch.setattr("src.ingest.programme_extractor.parse_key_facts", broken)
        result = extractor.extract_result(make_entry(), Language.EN)

        assert not result.ok
        assert result.error_type == "unknown"
        assert "RuntimeError" in result.error
