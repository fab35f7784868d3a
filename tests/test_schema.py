"""Tests for the interactive schema wizard and index creation."""

import json

import pytest

from searchbench.errors import SetupError
from searchbench.index import schema
from searchbench.index.schema import FieldSpec, build_schema, create_index, validate_field_name
from searchbench.index.searcher import extract_search_fields, read_schema_fields


@pytest.fixture
def answers(monkeypatch):
    """Feed scripted answers to input(); returns the list of prompts seen."""
    prompts = []

    def feed(*lines):
        it = iter(lines)

        def fake_input(prompt=""):
            prompts.append(prompt)
            return next(it)

        monkeypatch.setattr("builtins.input", fake_input)
        return prompts

    return feed


class TestPrompts:
    def test_field_name_validation(self):
        assert validate_field_name("title_2") is None
        assert validate_field_name("bad name") is not None
        assert validate_field_name("") is not None

    def test_yn_retries_until_valid(self, answers, capsys):
        prompts = answers("maybe", "", "y")
        assert schema.prompt_yn("Continue") is True
        assert len(prompts) == 3
        assert capsys.readouterr().out.count("Invalid input. Options are (Y/N)") == 2

    def test_field_type_case_insensitive(self, answers):
        answers("TEXT")
        assert schema.prompt_field_type("Choose Field Type") == "text"

    def test_field_type_rejects_unknown(self, answers, capsys):
        answers("string", "U64")
        assert schema.prompt_field_type("Choose Field Type") == "u64"
        assert "Invalid input" in capsys.readouterr().out


class TestAskSchema:
    def test_text_field_with_positions(self, answers):
        answers("title", "Text", "Y", "Y", "Y", "Y", "Y", "N")
        (spec,) = schema.ask_schema()
        assert spec == FieldSpec(
            name="title", field_type="text", stored=True, indexed=True,
            tokenizer="en_stem", index_option="position",
        )

    def test_text_field_with_freqs_only(self, answers):
        answers("body", "text", "n", "y", "y", "y", "n", "n")
        (spec,) = schema.ask_schema()
        assert spec.index_option == "freq"
        assert spec.stored is False

    def test_untokenized_text_field(self, answers):
        answers("id", "Text", "Y", "Y", "N", "N")
        (spec,) = schema.ask_schema()
        assert spec.tokenizer == "raw"
        assert spec.index_option == "basic"

    def test_unindexed_text_field(self, answers):
        answers("raw", "Text", "Y", "N", "N")
        (spec,) = schema.ask_schema()
        assert spec.indexed is False
        assert spec.tokenizer is None

    def test_several_fields(self, answers):
        answers(
            "bad name", "count", "u64", "Y", "N", "Y", "Y",
            "tags", "Facet", "Y",
            "blob", "Bytes", "N",
        )
        specs = schema.ask_schema()
        assert [(s.name, s.field_type) for s in specs] == [
            ("count", "u64"), ("tags", "facet"), ("blob", "bytes"),
        ]
        assert specs[0].stored and not specs[0].fast and specs[0].indexed
        assert specs[1].indexed


class TestBuildSchema:
    def test_creates_index_with_fields(self, tmp_path):
        specs = [
            FieldSpec("title", "text", stored=True, indexed=True,
                      tokenizer="en_stem", index_option="position"),
            FieldSpec("views", "u64", stored=True, indexed=False, fast=True),
            FieldSpec("score", "f64", indexed=True),
            FieldSpec("delta", "i64", indexed=True),
            FieldSpec("published", "date", stored=True, indexed=True),
            FieldSpec("tags", "facet", indexed=True),
        ]
        create_index(tmp_path / "idx", specs)
        fields = read_schema_fields(tmp_path / "idx")
        assert [f["name"] for f in fields] == [s.name for s in specs]
        assert extract_search_fields(fields) == ["title", "score", "delta", "published", "tags"]

    def test_u64_field(self, tmp_path):
        create_index(tmp_path / "idx", [FieldSpec("n", "u64", stored=True, indexed=True, fast=True)])
        (field,) = read_schema_fields(tmp_path / "idx")
        assert field["type"] == "u64"
        assert extract_search_fields([field]) == ["n"]

    def test_unindexed_text_field_warns(self, caplog):
        build_schema([FieldSpec("raw_text", "text", stored=True, indexed=False)])
        assert any(
            r.levelname == "WARNING" and "raw_text" in r.getMessage() for r in caplog.records
        )

    def test_unknown_type(self):
        with pytest.raises(ValueError, match="Unknown field type"):
            build_schema([FieldSpec("x", "string")])

    def test_existing_index_rejected(self, index_dir):
        with pytest.raises(SetupError, match="already exists"):
            create_index(index_dir, [FieldSpec("title", "text", indexed=True)])


class TestRunNew:
    def test_prints_schema_and_creates_index(self, answers, capsys, tmp_path):
        answers("title", "Text", "Y", "Y", "Y", "N", "N")
        specs = schema.run_new(tmp_path / "new_index")
        out = capsys.readouterr().out
        assert "First define its schema!" in out
        printed = json.loads(out[out.index("["): out.rindex("]") + 1])
        assert printed == [s.to_dict() for s in specs]
        assert (tmp_path / "new_index" / "meta.json").exists()
