"""
Tests for the command-line entry point.

Run with: pytest tests/test_run_scraper.py -v
"""

import json

import run_scraper
from src.core.models import Language
from src.ingest.harvester import LISTING_URLS


class TestRunScraper:
    """Tests for run_scraper.main with a canned fetcher."""

    def _patch_fetcher(self, monkeypatch, fetcher):
        monkeypatch.setattr(run_scraper, "PageFetcher", lambda **kwargs: fetcher)

    def test_languages_always_english_first(self):
        assert run_scraper.selected_languages(["cy", "en"]) == [Language.EN, Language.CY]
        assert run_scraper.selected_languages(None) == [Language.EN, Language.CY]
        assert run_scraper.selected_languages(["cy"]) == [Language.CY]

    def test_prints_json(self, monkeypatch, capsys, make_entry, make_page, fake_fetcher_cls):
        fetcher = fake_fetcher_cls({(LISTING_URLS[Language.EN], 0): make_page(make_entry())})
        self._patch_fetcher(monkeypatch, fetcher)

        assert run_scraper.main(["--pages", "0", "--no-delay"]) == 0

        payload = json.loads(capsys.readouterr().out)
        assert list(payload) == ["en", "cy"]
        assert payload["cy"] == []
        assert payload["en"][0]["slug"] == "awards-for-all-england"
        assert payload["en"][0]["legacyId"] == "LEGACY-PROG-awards-for-all-england"
        assert payload["en"][0]["minimum"] == 300

    def test_output_and_reports(self, monkeypatch, tmp_path, make_entry, make_page, fake_fetcher_cls):
        url_base = LISTING_URLS[Language.CY]
        fetcher = fake_fetcher_cls(
            {(url_base, 0): make_page(make_entry(href=""), make_entry(slug="x"))},
            failing=[(url_base, 1)],
        )
        self._patch_fetcher(monkeypatch, fetcher)
        output = tmp_path / "programmes.json"
        failures = tmp_path / "failures.json"
        stats = tmp_path / "stats.json"

        run_scraper.main([
            "--lang", "cy", "--pages", "1", "--no-delay",
            "--output", str(output),
            "--failures-out", str(failures),
            "--stats-out", str(stats),
        ])

        assert [p["slug"] for p in json.loads(output.read_text(encoding="utf-8"))["cy"]] == ["x"]
        assert json.loads(failures.read_text())["summary"]["error_summary"] == {
            "parsing": 1,
            "network": 1,
        }
        assert json.loads(stats.read_text())["stats"]["entries_extracted"] == 1
