"""Interactive schema definition and index creation."""

import json
import logging
import re
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Callable

import tantivy

from ..errors import SetupError

logger = logging.getLogger(__name__)

FIELD_NAME_PATTERN = re.compile(r"[_a-zA-Z0-9]+")

# Field types as offered in the prompt; answers are matched case-insensitively.
FIELD_TYPE_CHOICES = ["Text", "u64", "i64", "f64", "Date", "Facet", "Bytes"]
NUMERIC_TYPES = ("u64", "i64", "f64", "date")


@dataclass
class FieldSpec:
    """One schema field as answered in the wizard."""

    name: str
    field_type: str
    stored: bool = False
    indexed: bool = False
    fast: bool = False
    tokenizer: str | None = None
    index_option: str | None = None

    def to_dict(self) -> dict:
        return {k: v for k, v in asdict(self).items() if v is not None}


def prompt_input(prompt_text: str, validate: Callable[[str], str | None]) -> str:
    """Ask until validate() accepts the answer.

    validate returns None when the answer is fine, or an error message.
    """
    while True:
        answer = input(f"{prompt_text:<40} ? ").rstrip()
        error = validate(answer)
        if error is None:
            return answer
        print(f"Error: {error}")


def validate_field_name(field_name: str) -> str | None:
    if FIELD_NAME_PATTERN.fullmatch(field_name):
        return None
    return "Field name must match the pattern [_a-zA-Z0-9]+"


def prompt_options(msg: str, codes: list[str]) -> str:
    """Ask for one of several single-letter codes, case-insensitively."""
    options = "/".join(codes)

    def validate(entry: str) -> str | None:
        if len(entry) == 1 and entry.upper() in codes:
            return None
        return f"Invalid input. Options are ({options})"

    return prompt_input(f"{msg} ({options})", validate).upper()


def prompt_yn(msg: str) -> bool:
    return prompt_options(msg, ["Y", "N"]) == "Y"


def prompt_field_type(msg: str) -> str:
    options = "/".join(FIELD_TYPE_CHOICES)
    field_types = [c.lower() for c in FIELD_TYPE_CHOICES]

    def validate(entry: str) -> str | None:
        if entry.lower() in field_types:
            return None
        return f"Invalid input. Options are ({options})"

    return prompt_input(f"{msg} ({options})", validate).lower()


def ask_text_field(name: str) -> FieldSpec:
    spec = FieldSpec(name=name, field_type="text")
    spec.stored = prompt_yn("Should the field be stored")
    if prompt_yn("Should the field be indexed"):
        spec.indexed = True
        spec.tokenizer = "en_stem"
        spec.index_option = "basic"
        if prompt_yn("Should the term be tokenized?"):
            if prompt_yn("Should the term frequencies (per doc) be in the index"):
                if prompt_yn("Should the term positions (per doc) be in the index"):
                    spec.index_option = "position"
                else:
                    spec.index_option = "freq"
        else:
            spec.tokenizer = "raw"
    return spec


def ask_numeric_field(name: str, field_type: str) -> FieldSpec:
    spec = FieldSpec(name=name, field_type=field_type)
    spec.stored = prompt_yn("Should the field be stored")
    spec.fast = prompt_yn("Should the field be fast")
    spec.indexed = prompt_yn("Should the field be indexed")
    return spec


def ask_field() -> FieldSpec:
    print("\n\n")
    name = prompt_input("New field name ", validate_field_name)
    field_type = prompt_field_type("Choose Field Type")
    if field_type == "text":
        return ask_text_field(name)
    if field_type in NUMERIC_TYPES:
        return ask_numeric_field(name, field_type)
    # Facets are always indexed; bytes fields are created indexed.
    return FieldSpec(name=name, field_type=field_type, indexed=True)


def ask_schema() -> list[FieldSpec]:
    """Prompt for fields until the user declines to add another."""
    specs = [ask_field()]
    while prompt_yn("Add another field"):
        specs.append(ask_field())
    return specs


def build_schema(specs: list[FieldSpec]) -> tantivy.Schema:
    """Translate field specs into a tantivy schema."""
    builder = tantivy.SchemaBuilder()
    for spec in specs:
        if spec.field_type == "text":
            if spec.indexed:
                builder.add_text_field(
                    spec.name,
                    stored=spec.stored,
                    tokenizer_name=spec.tokenizer or "en_stem",
                    index_option=spec.index_option or "basic",
                )
            else:
                # tantivy-py always indexes text fields; raw keeps them as single terms.
                logger.warning(
                    "Text field %r cannot be left unindexed; indexing it with the raw tokenizer",
                    spec.name,
                )
                builder.add_text_field(spec.name, stored=spec.stored, tokenizer_name="raw")
        elif spec.field_type == "u64":
            builder.add_unsigned_field(
                spec.name, stored=spec.stored, indexed=spec.indexed, fast=spec.fast
            )
        elif spec.field_type == "i64":
            builder.add_integer_field(
                spec.name, stored=spec.stored, indexed=spec.indexed, fast=spec.fast
            )
        elif spec.field_type == "f64":
            builder.add_float_field(
                spec.name, stored=spec.stored, indexed=spec.indexed, fast=spec.fast
            )
        elif spec.field_type == "date":
            builder.add_date_field(
                spec.name, stored=spec.stored, indexed=spec.indexed, fast=spec.fast
            )
        elif spec.field_type == "facet":
            builder.add_facet_field(spec.name)
        elif spec.field_type == "bytes":
            builder.add_bytes_field(spec.name, indexed=True)
        else:
            raise ValueError(f"Unknown field type: {spec.field_type}")
    return builder.build()


def create_index(directory: Path | str, specs: list[FieldSpec]) -> tantivy.Index:
    """Create an empty index with the given fields in ``directory``."""
    directory = Path(directory)
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise SetupError(f"Failed to create index directory {directory}.\n{e}") from e
    if tantivy.Index.exists(str(directory)):
        raise SetupError(f"An index already exists in {directory}")
    try:
        index = tantivy.Index(build_schema(specs), path=str(directory), reuse=False)
    except ValueError as e:
        raise SetupError(f"Failed to create index.\n{e}") from e
    logger.info("Created index in %s with %d fields", directory, len(specs))
    return index


def run_new(directory: Path | str) -> list[FieldSpec]:
    """Interactively define a schema and create the index."""
    print("\nCreating new index")
    print("First define its schema!")
    specs = ask_schema()
    print("\n" + json.dumps([s.to_dict() for s in specs], indent=2) + "\n")
    create_index(directory, specs)
    return specs
