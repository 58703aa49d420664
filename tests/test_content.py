from datetime import datetime, timezone
from pathlib import Path

import pytest

from folio.collections import COLLECTIONS
from folio.content import (
    CollectionDefinition,
    EntryBuilder,
    EntryValidationError,
    FileContentLoader,
    load_collection,
)
from folio.extractors import FrontmatterError, extract_frontmatter, read_frontmatter
from folio.images import PillowImageResolver
from folio.renderers import MarkdownRenderer
from folio.schemas import Series


def write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def create_content(tmp_path: Path) -> Path:
    content = tmp_path / "content"
    write(
        content / "post" / "hello-world.md",
        "---\n"
        "title: Hello World\n"
        "description: First post\n"
        "publishDate: 2024-01-15\n"
        "tags: [Kotlin, kotlin, Android]\n"
        "seriesId: kotlin-basics\n"
        "orderInSeries: 1\n"
        "---\n\n"
        "## Intro\n\nSome text.\n",
    )
    write(
        content / "post" / "2024" / "Second Post.mdx",
        "---\n"
        "title: Second\n"
        "description: Another\n"
        'publishDate: "2024-02-01"\n'
        "draft: true\n"
        "---\n\nBody\n",
    )
    write(content / "post" / "_draft-notes.md", "---\ntitle: hidden\n---\n")
    write(content / "post" / "_partials" / "note.md", "---\ntitle: hidden\n---\n")
    write(content / "post" / "notes.txt", "ignore me")

    write(
        content / "series" / "kotlin.md",
        "---\nid: kotlin-basics\ntitle: Kotlin Basics\ndescription: Learn Kotlin\nfeatured: true\n---\n",
    )
    write(
        content / "series" / "compose.md",
        "---\nid: compose\ntitle: Compose\ndescription: UI toolkit\n---\n",
    )
    write(
        content / "series" / "broken.md",
        "---\nid: broken\ntitle: Broken series\n---\n",
    )
    return content


# --- Front matter ---


def test_extract_frontmatter():
    data, body = extract_frontmatter("---\ntitle: Hi\ntags: [a]\n---\nBody text")
    assert data == {"title": "Hi", "tags": ["a"]}
    assert body == "Body text"


def test_extract_frontmatter_without_block():
    data, body = extract_frontmatter("# Just markdown")
    assert data == {}
    assert body == "# Just markdown"


def test_extract_frontmatter_empty_block():
    data, body = extract_frontmatter("---\n---\nBody")
    assert data == {}
    assert body == "Body"


def test_extract_frontmatter_invalid_yaml():
    with pytest.raises(FrontmatterError) as excinfo:
        extract_frontmatter("---\ntitle: [unclosed\n---\nBody", Path("bad.md"))
    assert excinfo.value.source_path == Path("bad.md")
    assert "Invalid YAML" in excinfo.value.message


def test_extract_frontmatter_requires_mapping():
    with pytest.raises(FrontmatterError) as excinfo:
        extract_frontmatter("---\n- a\n- b\n---\n")
    assert "mapping" in excinfo.value.message


# --- Loading ---


def test_file_content_loader_skips_underscore_and_other_files(tmp_path):
    content = create_content(tmp_path)
    files = FileContentLoader(content / "post").iter_files()
    names = [p.name for p in files]
    assert names == ["Second Post.mdx", "hello-world.md"]


def test_file_content_loader_missing_directory(tmp_path):
    assert FileContentLoader(tmp_path / "missing").iter_files() == []


def test_load_posts(tmp_path):
    content = create_content(tmp_path)
    result = load_collection(COLLECTIONS["post"], content)
    assert result.ok
    entries = {e.id: e for e in result.entries}
    assert set(entries) == {"hello-world", "2024/second-post"}

    hello = entries["hello-world"]
    assert hello.collection == "post"
    assert hello.data.tags == ["kotlin", "android"]
    assert hello.data.publish_date == datetime(2024, 1, 15, tzinfo=timezone.utc)
    assert hello.data.draft is False
    assert hello.data.updated_date is None
    assert hello.body.startswith("\n## Intro")

    second = entries["2024/second-post"]
    assert second.data.draft is True
    assert second.data.publish_date == datetime(2024, 2, 1, tzinfo=timezone.utc)


def test_invalid_series_is_isolated(tmp_path):
    content = create_content(tmp_path)
    result = load_collection(COLLECTIONS["series"], content)

    assert sorted(e.data.id for e in result.entries) == ["compose", "kotlin-basics"]
    assert len(result.errors) == 1
    error = result.errors[0]
    assert isinstance(error, EntryValidationError)
    assert error.source_path.name == "broken.md"
    assert error.collection == "series"
    assert [f.path for f in error.field_errors] == ["description"]
    assert "broken.md" in str(error)
    assert "description" in error.message


def test_malformed_yaml_is_reported_per_file(tmp_path):
    content = create_content(tmp_path)
    write(content / "series" / "zzz.md", "---\nid: [oops\n---\n")
    result = load_collection(COLLECTIONS["series"], content)
    assert len(result.entries) == 2
    bad = next(e for e in result.errors if e.source_path.name == "zzz.md")
    assert bad.field_errors[0].path == ""
    assert "Invalid YAML" in bad.field_errors[0].message


def test_out_of_range_yaml_date_is_isolated(tmp_path):
    content = tmp_path / "content"
    write(content / "series" / "good.md", "---\nid: good\ntitle: Good\ndescription: d\n---\n")
    write(
        content / "series" / "bad-date.md",
        "---\nid: bad\ntitle: Bad\ndescription: d\nwhen: 2024-13-45\n---\n",
    )
    result = load_collection(COLLECTIONS["series"], content)
    assert [e.id for e in result.entries] == ["good"]
    assert [e.source_path.name for e in result.errors] == ["bad-date.md"]
    assert result.errors[0].field_errors[0].path == ""
    assert "Invalid YAML" in result.errors[0].field_errors[0].message


def test_undecodable_file_is_isolated(tmp_path):
    content = tmp_path / "content"
    write(content / "series" / "good.md", "---\nid: good\ntitle: Good\ndescription: d\n---\n")
    (content / "series" / "binary.md").write_bytes(b"---\ntitle: \xff\xfe\n---\n")
    result = load_collection(COLLECTIONS["series"], content)
    assert [e.id for e in result.entries] == ["good"]
    assert [e.source_path.name for e in result.errors] == ["binary.md"]
    assert result.errors[0].field_errors[0].path == ""
    assert "UTF-8" in result.errors[0].field_errors[0].message


def test_read_frontmatter_wraps_read_errors(tmp_path):
    with pytest.raises(FrontmatterError) as excinfo:
        read_frontmatter(tmp_path / "missing.md")
    assert excinfo.value.source_path == tmp_path / "missing.md"
    assert "Cannot read file" in excinfo.value.message


def test_file_without_frontmatter_fails_required_fields(tmp_path):
    content = tmp_path / "content"
    write(content / "series" / "plain.md", "# No front matter\n")
    result = load_collection(COLLECTIONS["series"], content)
    assert result.entries == []
    assert {f.path for f in result.errors[0].field_errors} == {"id", "title", "description"}


def test_slug_overrides_path_id(tmp_path):
    content = tmp_path / "content"
    write(
        content / "project" / "some-file.md",
        "---\nslug: my-app\ntitle: My App\ndescription: d\npublishDate: 2023-05-01\n---\n",
    )
    result = load_collection(COLLECTIONS["project"], content)
    assert [e.id for e in result.entries] == ["my-app"]


def test_duplicate_ids_are_rejected(tmp_path):
    content = tmp_path / "content"
    series = "---\nid: {0}\ntitle: T\ndescription: D\n---\n"
    write(content / "series" / "same.md", series.format("a"))
    write(content / "series" / "same.mdx", series.format("b"))
    result = load_collection(COLLECTIONS["series"], content)
    assert [e.path.name for e in result.entries] == ["same.md"]
    assert len(result.errors) == 1
    assert result.errors[0].source_path.name == "same.mdx"
    assert "duplicate entry id 'same'" in result.errors[0].field_errors[0].message


def test_missing_collection_directory_is_empty(tmp_path):
    result = load_collection(COLLECTIONS["project"], tmp_path / "content")
    assert result.entries == []
    assert result.ok


def test_custom_collection_definition(tmp_path):
    content = tmp_path / "content"
    write(content / "talks" / "kotlinconf.md", "---\nid: kc\ntitle: KotlinConf\ndescription: d\n---\n")
    definition = CollectionDefinition(name="talks", base="talks", schema=Series, patterns=("*.md",))
    result = load_collection(definition, content)
    assert [e.collection for e in result.entries] == ["talks"]


# --- Images ---


def test_relative_images_are_resolved(tmp_path):
    from PIL import Image

    content = tmp_path / "content"
    post_dir = content / "post"
    post_dir.mkdir(parents=True)
    Image.new("RGB", (4, 3), color="blue").save(post_dir / "cover.png")
    path = write(
        post_dir / "with-cover.md",
        "---\ntitle: Cover\ndescription: d\npublishDate: 2024-01-01\n"
        "coverImage:\n  alt: A cover\n  src: ./cover.png\n---\n",
    )

    builder = EntryBuilder(COLLECTIONS["post"], post_dir, PillowImageResolver())
    entry = builder.build(path)
    src = entry.data.cover_image.src
    assert (src.width, src.height) == (4, 3)
    assert src.format == "png"
    assert src.path == post_dir / "./cover.png"


def test_missing_image_rejects_entry(tmp_path):
    content = tmp_path / "content"
    write(
        content / "post" / "no-image.md",
        "---\ntitle: Missing\ndescription: d\npublishDate: 2024-01-01\n"
        "heroImage:\n  src: ./nope.png\n---\n",
    )
    result = load_collection(COLLECTIONS["post"], content, PillowImageResolver())
    assert result.entries == []
    assert [f.path for f in result.errors[0].field_errors] == ["heroImage.src"]


# --- Rendering ---


def test_entry_render(tmp_path):
    content = create_content(tmp_path)
    result = load_collection(COLLECTIONS["post"], content)
    hello = next(e for e in result.entries if e.id == "hello-world")
    rendered = hello.render()
    assert '<h2 id="intro">Intro</h2>' in rendered.html
    assert [(h.id, h.level) for h in rendered.headings] == [("intro", 2)]


def test_markdown_renderer_deduplicates_heading_ids():
    rendered = MarkdownRenderer().render("## Setup\n\ntext\n\n## Setup\n")
    assert [h.id for h in rendered.headings] == ["setup", "setup-1"]
    assert '<h2 id="setup-1">' in rendered.html
