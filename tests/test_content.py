import logging
from datetime import datetime, timezone
from pathlib import Path

import pytest

from musings.content import PostLoader, PostLoadError

STAMP = "2024-05-06 07:08:09"


def test_normalize_example_post(loader):
    text = "---\nCreatedDate: 2024-01-01 10:00:00\n---\n# Hello\nWorld"
    normalized = loader.normalize(text)
    post = normalized.post
    created = datetime(2024, 1, 1, 10, 0, 0, tzinfo=timezone.utc)

    assert post.title == "Hello"
    assert post.slug == "hello"
    assert post.content == "World"
    assert post.created_date == created
    assert post.updated_date == created
    assert post.tags == []
    assert post.published is False
    assert post.filename == "hello.html"
    assert normalized.defaulted == {"UpdatedDate": created}


def test_normalize_reads_tags_and_published(loader):
    text = (
        "---\nCreatedDate: 2024-01-02 15:04:05\nUpdatedDate: 2024-01-03 09:00:00\n"
        "Tags: go, blogging\nPublished: TRUE\n---\n# Post Title\n\nbody markdown...\n"
    )
    normalized = loader.normalize(text)
    post = normalized.post
    assert post.tags == ["go", "blogging"]
    assert post.published is True
    assert post.updated_date == datetime(2024, 1, 3, 9, 0, 0, tzinfo=timezone.utc)
    assert post.content == "body markdown..."
    assert not normalized.needs_repair


def test_published_requires_true(loader):
    post = loader.normalize("---\nPublished: yes\n---\n# T").post
    assert post.published is False


def test_missing_dates_use_injected_clock(loader, fixed_now):
    normalized = loader.normalize("# Hi\nbody")
    assert normalized.post.created_date == fixed_now
    assert normalized.post.updated_date == fixed_now
    assert set(normalized.defaulted) == {"CreatedDate", "UpdatedDate"}


def test_clock_is_truncated_and_made_aware():
    naive = PostLoader(clock=lambda: datetime(2024, 1, 1, 12, 0, 0, 999))
    post = naive.normalize("# T").post
    assert post.created_date == datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


def test_untitled_post(loader):
    post = loader.normalize("just some text").post
    assert post.title == "Untitled"
    assert post.slug == "untitled"
    assert post.content == "just some text"


def test_snippet_is_truncated_and_rendered(loader):
    text = "---\nCreatedDate: 2024-01-01 10:00:00\nUpdatedDate: 2024-01-01 10:00:00\n---\n"
    post = loader.normalize(text + "A" * 200).post
    assert len(post.content_snippet) == 153
    assert post.content_snippet == "A" * 150 + "..."
    assert post.content_snippet_html.startswith("<p>")


def test_content_is_rendered_to_html(loader):
    post = loader.normalize("# T\n\nSome **bold** text").post
    assert "<strong>bold</strong>" in post.content_html
    assert "<h1" not in post.content_html


def test_malformed_date_is_warned_and_defaulted(loader, fixed_now, caplog):
    text = "---\nCreatedDate: yesterday\n---\n# T"
    with caplog.at_level(logging.WARNING):
        normalized = loader.normalize(text, Path("post.md"))
    assert normalized.post.created_date == fixed_now
    assert "Invalid CreatedDate" in caplog.text
    assert "post.md" in caplog.text
    assert normalized.repaired_text() == (
        f"---\nCreatedDate: {STAMP}\nUpdatedDate: {STAMP}\n---\n# T\n"
    )


def test_load_repairs_file_without_metadata(tmp_path, loader):
    path = tmp_path / "hello.md"
    path.write_text("# Hello\nWorld\n", encoding="utf-8")

    post = loader.load_and_maybe_repair(path)

    assert post.source_path == path
    assert path.read_text(encoding="utf-8") == (
        f"---\nCreatedDate: {STAMP}\nUpdatedDate: {STAMP}\n---\n# Hello\nWorld\n"
    )


def test_repaired_file_is_stable_on_next_load(tmp_path, loader, fixed_now):
    path = tmp_path / "hello.md"
    path.write_text("# Hello\nWorld\n", encoding="utf-8")
    loader.load_and_maybe_repair(path)
    repaired = path.read_text(encoding="utf-8")

    later = PostLoader(clock=lambda: datetime(2030, 1, 1, tzinfo=timezone.utc))
    normalized = later.normalize(repaired)
    assert normalized.defaulted == {}
    post = later.load_and_maybe_repair(path)
    assert post.created_date == fixed_now
    assert post.updated_date == fixed_now
    assert path.read_text(encoding="utf-8") == repaired


def test_load_appends_missing_updated_date(tmp_path, loader):
    path = tmp_path / "post.md"
    path.write_text(
        "---\nCreatedDate: 2024-01-01 10:00:00\nTags: a, b\n---\n# T\n\nBody line\n",
        encoding="utf-8",
    )
    post = loader.load_and_maybe_repair(path)

    assert post.updated_date == post.created_date
    assert path.read_text(encoding="utf-8") == (
        "---\nCreatedDate: 2024-01-01 10:00:00\nTags: a, b\n"
        "UpdatedDate: 2024-01-01 10:00:00\n---\n# T\n\nBody line\n"
    )


def test_load_leaves_complete_file_untouched(tmp_path, loader):
    text = (
        "---\nCreatedDate: 2024-01-01 10:00:00\nUpdatedDate: 2024-01-02 10:00:00\n"
        "---\n# T\nbody"
    )
    path = tmp_path / "post.md"
    path.write_text(text, encoding="utf-8")
    loader.load_and_maybe_repair(path)
    assert path.read_text(encoding="utf-8") == text


def test_repair_can_be_disabled(tmp_path, fixed_now):
    path = tmp_path / "post.md"
    path.write_text("# T\n", encoding="utf-8")
    post = PostLoader(clock=lambda: fixed_now, repair=False).load_and_maybe_repair(path)
    assert post.created_date == fixed_now
    assert path.read_text(encoding="utf-8") == "# T\n"


def test_repair_failure_is_only_a_warning(
    tmp_path, loader, fixed_now, monkeypatch, caplog
):
    path = tmp_path / "post.md"
    path.write_text("# T\n", encoding="utf-8")

    def fail_write(self, *args, **kwargs):
        raise PermissionError("read-only")

    monkeypatch.setattr(Path, "write_text", fail_write)
    with caplog.at_level(logging.WARNING):
        post = loader.load_and_maybe_repair(path)

    assert post.created_date == fixed_now
    assert "Could not update" in caplog.text


def test_unreadable_post_raises_with_path(tmp_path, loader):
    missing = tmp_path / "missing.md"
    with pytest.raises(PostLoadError) as excinfo:
        loader.load_and_maybe_repair(missing)
    assert excinfo.value.source_path == missing
    assert isinstance(excinfo.value.original_error, FileNotFoundError)

    binary = tmp_path / "binary.md"
    binary.write_bytes(b"\xff\xfe\xfa not utf-8")
    with pytest.raises(PostLoadError) as excinfo:
        loader.load_and_maybe_repair(binary)
    assert excinfo.value.source_path == binary
