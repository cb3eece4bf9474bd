from __future__ import annotations

import json
from pathlib import Path

from ragnator.cancellation import CancellationToken
from ragnator.config import BundleConfig, ExtractionConfig, RagnatorConfig
from ragnator.driver import run_as_structured, run_as_text, run_pipeline
from ragnator.types import DocumentStatus, OutputFormat


def _page(word: str, sentences: int = 30) -> str:
    return " ".join(f"{word} sentence {i} carries some filler text." for i in range(sentences))


def test_text_run_processes_queue_in_order(make_files, fake_extractor, fixed_clock):
    paths = make_files("alpha.pdf", "beta.pdf")
    extractor = fake_extractor({"alpha.pdf": [_page("Alpha"), _page("Alpha")], "beta.pdf": [_page("Beta")]})

    result = run_as_text(paths, extractor=extractor, clock=fixed_clock)

    assert extractor.opened == ["alpha.pdf", "beta.pdf"]
    assert [d.status for d in result.documents] == [DocumentStatus.DONE, DocumentStatus.DONE]
    assert result.format is OutputFormat.TEXT
    assert len(result.bundles) == 1
    bundle = result.bundles[0]
    assert bundle.name == "RAGNATOR_PART_001.txt"
    assert bundle.content.index('Source="alpha.pdf"') < bundle.content.index('Source="beta.pdf"')
    assert bundle.record_count == sum(d.chunks_emitted for d in result.documents)
    assert "[PAGE_END" not in bundle.content
    assert result.manifest.total_files == 1
    assert result.manifest.total_size_bytes == len(bundle.content.encode("utf-8"))


def test_structured_run_emits_ndjson_with_pages(make_files, fake_extractor, fixed_clock):
    paths = make_files("book.pdf")
    extractor = fake_extractor({"book.pdf": [_page("One"), _page("Two"), _page("Three")]})

    result = run_as_structured(paths, extractor=extractor, clock=fixed_clock)

    bundle = result.bundles[0]
    assert bundle.name.endswith(".ndjson")
    records = [json.loads(line) for line in bundle.content.splitlines()]
    assert len(records) == result.documents[0].chunks_emitted
    assert {r["source"] for r in records} == {"book.pdf"}
    assert [r["page"] for r in records] == sorted(r["page"] for r in records)
    assert records[-1]["page"] == 3
    assert len({r["id"] for r in records}) == len(records)
    assert all(r["created_at"] == "2024-05-17T12:30:00+00:00" for r in records)



def test_same_file_name_in_different_folders_gets_distinct_ids(tmp_path: Path, fake_extractor, fixed_clock):
    paths = []
    for folder in ("a", "b"):
        (tmp_path / folder).mkdir()
        path = tmp_path / folder / "report.pdf"
        path.write_bytes(b"placeholder")
        paths.append(path)
    extractor = fake_extractor({"report.pdf": ["A single short page about quarterly results."]})

    result = run_as_structured(paths, extractor=extractor, clock=fixed_clock)

    records = [json.loads(line) for line in result.bundles[0].content.splitlines()]
    assert len(records) == 2
    assert {r["source"] for r in records} == {"report.pdf"}
    assert len({r["id"] for r in records}) == 2

def test_document_failure_does_not_abort_queue(make_files, fake_extractor, broken_document, fixed_clock):
    paths = make_files("good.pdf", "broken.pdf", "later.pdf")
    extractor = fake_extractor(
        {"good.pdf": [_page("Good")], "broken.pdf": broken_document, "later.pdf": [_page("Later")]}
    )

    result = run_as_text(paths, extractor=extractor, clock=fixed_clock)

    statuses = [d.status for d in result.documents]
    assert statuses == [DocumentStatus.DONE, DocumentStatus.ERROR, DocumentStatus.DONE]
    assert "damaged xref" in result.documents[1].error
    assert [d.name for d in result.failed] == ["broken.pdf"]
    assert 'Source="later.pdf"' in result.bundles[0].content


def test_page_failure_is_skipped(make_files, fake_extractor, fixed_clock):
    paths = make_files("gappy.pdf")
    extractor = fake_extractor({"gappy.pdf": [_page("First"), None, _page("Third")]})

    result = run_as_text(paths, extractor=extractor, clock=fixed_clock)

    report = result.documents[0]
    assert report.status is DocumentStatus.DONE
    assert report.pages_read == 2
    assert report.pages_skipped == 1
    assert "Third sentence" in result.bundles[0].content


def test_missing_and_unsupported_files_are_errors(tmp_path: Path, fixed_clock):
    unsupported = tmp_path / "deck.pptx"
    unsupported.write_bytes(b"PK")
    notes = tmp_path / "notes.txt"
    notes.write_text(_page("Notes"), encoding="utf-8")

    result = run_as_text([tmp_path / "missing.pdf", unsupported, notes], clock=fixed_clock)

    assert [d.status for d in result.documents] == [
        DocumentStatus.ERROR,
        DocumentStatus.ERROR,
        DocumentStatus.DONE,
    ]
    assert "not found" in result.documents[0].error
    assert "Unsupported" in result.documents[1].error
    assert "Format not supported" not in result.bundles[0].content
    assert 'Source="notes.txt" | Page=1' in result.bundles[0].content


def test_bundles_span_documents_and_respect_cap(make_files, fake_extractor, fixed_clock):
    paths = make_files("a.pdf", "b.pdf", "c.pdf")
    extractor = fake_extractor({name.name: [_page(name.stem.upper(), 120)] for name in paths})
    config = RagnatorConfig(bundles=BundleConfig(max_bundle_size=4000, base_name="TEST"))

    result = run_pipeline(paths, "ndjson", config=config, extractor=extractor, clock=fixed_clock)

    assert len(result.bundles) > 1
    assert [b.name for b in result.bundles][:2] == ["TEST_PART_001.ndjson", "TEST_PART_002.ndjson"]
    for bundle in result.bundles:
        assert bundle.size <= 4000 or bundle.record_count == 1
        assert bundle.size == len(bundle.content.encode("utf-8"))
    assert result.manifest.total_chunks_approx == sum(d.chunks_emitted for d in result.documents)


def test_cancellation_stops_between_pages(make_files, fake_extractor, fixed_clock):
    paths = make_files("first.pdf", "second.pdf")
    token = CancellationToken()
    extractor = fake_extractor({"first.pdf": [_page("One")] * 10, "second.pdf": [_page("Two")]})
    seen = []

    def on_progress(update):
        seen.append(update)
        token.cancel()

    result = run_as_text(paths, extractor=extractor, cancel_token=token, on_progress=on_progress, clock=fixed_clock)

    assert result.cancelled is True
    assert [d.status for d in result.documents] == [DocumentStatus.CANCELLED, DocumentStatus.PENDING]
    assert extractor.opened == ["first.pdf"]
    assert seen[0].filename == "first.pdf" and seen[0].percent == 50
    assert result.documents[0].pages_read == 5
    assert sum(b.record_count for b in result.bundles) == result.documents[0].chunks_emitted



def test_progress_percent_rounds_halves_up(make_files, fake_extractor, fixed_clock):
    paths = make_files("eight.pdf")
    extractor = fake_extractor({"eight.pdf": [_page("Page", 2)] * 8})
    config = RagnatorConfig(extraction=ExtractionConfig(progress_every=1))
    seen = []

    run_as_text(paths, config=config, extractor=extractor, on_progress=seen.append, clock=fixed_clock)

    assert [u.percent for u in seen] == [13, 25, 38, 50, 63, 75, 88, 100, 100]

def test_cancelled_before_start_leaves_queue_pending(make_files, fake_extractor, fixed_clock):
    paths = make_files("only.pdf")
    token = CancellationToken()
    token.cancel()

    result = run_as_text(paths, extractor=fake_extractor({"only.pdf": [_page("x")]}), cancel_token=token, clock=fixed_clock)

    assert result.cancelled is True
    assert result.documents[0].status is DocumentStatus.PENDING
    assert result.bundles == []
    assert result.manifest.total_files == 0


def test_empty_queue_produces_empty_manifest(fixed_clock):
    result = run_as_structured([], clock=fixed_clock)
    assert result.bundles == []
    assert result.manifest.format == "ndjson"
    assert result.manifest.total_chunks_approx == 0
