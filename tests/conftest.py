"""Shared fixtures: a small on-disk tantivy index."""

import pytest
import tantivy

DOCS = [
    {"title": "The Old Man and the Sea", "body": "He was an old man who fished alone"},
    {"title": "Of Mice and Men", "body": "A few miles south of Soledad"},
    {"title": "Frankenstein", "body": "You will rejoice to hear that no disaster"},
]


def build_index(path, docs=DOCS, commits=1):
    """Create an index with stored title/body fields, spreading docs over commits."""
    builder = tantivy.SchemaBuilder()
    builder.add_text_field("title", stored=True)
    builder.add_text_field("body", stored=True)
    builder.add_unsigned_field("rank", stored=True, indexed=False)
    index = tantivy.Index(builder.build(), path=str(path))
    writer = index.writer()
    for i, d in enumerate(docs):
        doc = tantivy.Document()
        doc.add_text("title", d["title"])
        doc.add_text("body", d["body"])
        doc.add_unsigned("rank", i)
        writer.add_document(doc)
        if commits > 1 and i < commits - 1:
            writer.commit()
    writer.commit()
    writer.wait_merging_threads()
    return index


@pytest.fixture
def make_index(tmp_path):
    def make(name="index", commits=1):
        path = tmp_path / name
        path.mkdir()
        build_index(path, commits=commits)
        return path

    return make


@pytest.fixture
def index_dir(tmp_path):
    path = tmp_path / "index"
    path.mkdir()
    build_index(path)
    return path


@pytest.fixture
def query_file(tmp_path):
    path = tmp_path / "queries.txt"
    path.write_text("title:old\nbody:soledad\nfrankenstein\n")
    return path
