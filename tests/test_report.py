# File: tests/test_report.py
import json

from domain_scout.aggregator import DomainResult, ScanReport, build_results, merge_sources, sort_results
from domain_scout.report import render_json


def test_build_results_sorted():
    sources = {
        "b-domain.com": {"https://s.com/1", "https://s.com/2"},
        "a-domain.com": {"https://s.com/3", "https://s.com/1"},
        "c-domain.com": {"https://s.com/9", "https://s.com/8", "https://s.com/7"},
        "registered.com": {"https://s.com/1"},
    }
    results = build_results(sources, ["b-domain.com", "a-domain.com", "c-domain.com"])

    assert [r.domain for r in results] == ["c-domain.com", "a-domain.com", "b-domain.com"]
    assert results[0].source_urls == ["https://s.com/7", "https://s.com/8", "https://s.com/9"]
    assert results[1].source_link_count == 2


def test_sort_results_ties_alphabetical():
    results = [DomainResult("zz.com", 1), DomainResult("aa.com", 1), DomainResult("mm.com", 5)]
    assert [r.domain for r in sort_results(results)] == ["mm.com", "aa.com", "zz.com"]


def test_merge_sources():
    target = {"a.com": {"https://x/1"}}
    merge_sources(target, {"a.com": {"https://y/1"}, "b.com": {"https://y/2"}})
    assert target == {"a.com": {"https://x/1", "https://y/1"}, "b.com": {"https://y/2"}}


def test_report_json():
    report = ScanReport(results=[DomainResult("lost.com", 1, ["https://s.com/"])], pages_visited=4, cancelled=True)
    data = json.loads(report.json())
    assert data["results"] == [{"domain": "lost.com", "source_link_count": 1, "source_urls": ["https://s.com/"]}]
    assert data["pages_visited"] == 4
    assert data["cancelled"] is True
    assert "\n" in report.json(pretty=True)


def test_render_json_creates_parents(tmp_path):
    report = ScanReport(results=[DomainResult("lost.com", 1, ["https://s.com/"])])
    out = render_json(report, tmp_path / "reports" / "nested" / "domains.json")

    assert out.exists()
    assert json.loads(out.read_text(encoding="utf-8"))["results"][0]["domain"] == "lost.com"


def test_render_json_from_list(tmp_path):
    out = render_json([DomainResult("lost.com", 2, ["a", "b"])], tmp_path / "list.json")
    assert json.loads(out.read_text(encoding="utf-8")) == {
        "results": [{"domain": "lost.com", "source_link_count": 2, "source_urls": ["a", "b"]}]
    }
