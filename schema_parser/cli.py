# ==============================================
# CLI: Command Line Entry Point
# ==============================================
#
# PURPOSE:
#   Run the schema parser from the shell.
#
# COMMANDS:
# ---------
# 1. Infer a schema from a file of Extended JSON documents
#    (a JSON array, or one document per line; "-" reads stdin):
#    python -m schema_parser.cli infer documents.json
#    python -m schema_parser.cli infer documents.jsonl --out schema.json
#
# 2. Sample a MongoDB collection and infer its schema:
#    python -m schema_parser.cli sample --collection users --size 500
#    python -m schema_parser.cli sample --collection users --query '{"active": true}'
#    (with --query, the first --size matching documents are read instead
#    of a random sample)
#
# OPTIONS:
# --------
#   --strict       Fail on the first document with a type conflict
#   --indent N     JSON indentation of the output
#   --log-level L  DEBUG, INFO, WARNING, ...
#
# EXIT CODES:
# -----------
#   0 success, 1 unreadable input, unsupported value or strict-mode conflict
#
# ==============================================

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from bson import json_util

from schema_parser.config import AppConfig, get_config
from schema_parser.errors import ConflictError, UnsupportedValueError
from schema_parser.logging_setup import configure_logging
from schema_parser.persistence import MetadataStore
from schema_parser.schema_parser import SchemaParser
from schema_parser.storage import MongoClient


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="schema-parser",
        description="Infer a statistical schema from BSON documents."
    )
    parser.add_argument("--log-level", default=None, help="Logging level (default from LOG_LEVEL)")

    subcommands = parser.add_subparsers(dest="command", required=True)

    infer = subcommands.add_parser("infer", help="Infer a schema from an Extended JSON file")
    infer.add_argument("file", help="JSON array or one document per line, '-' for stdin")
    _add_output_options(infer)

    sample = subcommands.add_parser("sample", help="Sample a MongoDB collection")
    sample.add_argument("--collection", default=None, help="Collection (default MONGO_COLLECTION)")
    sample.add_argument("--size", type=int, default=None, help="Documents to sample (default SAMPLE_SIZE)")
    sample.add_argument("--query", default=None, help="Extended JSON filter; reads matching documents instead of sampling")
    _add_output_options(sample)

    return parser


def _add_output_options(subparser: argparse.ArgumentParser) -> None:
    subparser.add_argument("--out", default=None, help="Write the schema here instead of stdout")
    subparser.add_argument("--strict", action="store_true", help="Fail on type conflicts")
    subparser.add_argument("--indent", type=int, default=None, help="JSON indentation")


def read_documents(text: str) -> list:
    """
    Decode Extended JSON text into documents.

    A text starting with "[" is one JSON array; anything else is read
    as one document per non-empty line.
    """
    stripped = text.strip()
    if not stripped:
        return []
    if stripped.startswith("["):
        return json_util.loads(stripped)
    return [json_util.loads(line) for line in stripped.splitlines() if line.strip()]


def _read_input(file_arg: str) -> str:
    if file_arg == "-":
        return sys.stdin.read()
    return Path(file_arg).read_text(encoding="utf-8")


def _emit(schema_parser: SchemaParser, out: Optional[str], indent: int) -> None:
    output = schema_parser.to_json(indent=indent)
    if out:
        Path(out).write_text(output + "\n", encoding="utf-8")
        print(f"✓ Schema written to {out}")
    else:
        print(output)


def _parse(documents: list, args: argparse.Namespace, config: AppConfig) -> Optional[SchemaParser]:
    # Returns None after printing the error when the batch cannot be parsed
    schema_parser = SchemaParser(config, strict=args.strict or None)
    try:
        schema_parser.write_batch(documents)
    except (ConflictError, UnsupportedValueError) as e:
        print(f"✗ {e}", file=sys.stderr)
        return None

    schema_parser.flush()
    return schema_parser


def run_infer(args: argparse.Namespace, config: AppConfig) -> int:
    try:
        documents = read_documents(_read_input(args.file))
    except (OSError, ValueError) as e:
        print(f"✗ Could not read {args.file}: {e}", file=sys.stderr)
        return 1

    schema_parser = _parse(documents, args, config)
    if schema_parser is None:
        return 1

    _emit(schema_parser, args.out, _indent(args, config))
    return 0


def run_sample(args: argparse.Namespace, config: AppConfig) -> int:
    collection = args.collection or config.mongo.collection
    if not collection:
        print("✗ No collection given (use --collection or MONGO_COLLECTION)", file=sys.stderr)
        return 1
    size = args.size or config.parser.sample_size

    query = None
    if args.query:
        try:
            query = json_util.loads(args.query)
        except ValueError as e:
            print(f"✗ Invalid --query: {e}", file=sys.stderr)
            return 1

    with MongoClient(
        host=config.mongo.host,
        port=config.mongo.port,
        database=config.mongo.database,
        user=config.mongo.user,
        password=config.mongo.password
    ) as db:
        if query is None:
            documents = db.sample(collection, size)
        else:
            documents = db.find(collection, query, limit=size)

    schema_parser = _parse(documents, args, config)
    if schema_parser is None:
        return 1

    store = MetadataStore(config.metadata_dir)
    store.save_schema(schema_parser.to_dict(), name=collection)
    store.save_state(
        total_documents=schema_parser.count,
        conflicts=[conflict.to_dict() for conflict in schema_parser.conflicts]
    )

    _emit(schema_parser, args.out, _indent(args, config))
    return 0


def _indent(args: argparse.Namespace, config: AppConfig) -> int:
    return config.parser.json_indent if args.indent is None else args.indent


def main(argv: Optional[List[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)
    config = get_config()
    configure_logging(args.log_level or config.log_level)

    if args.command == "infer":
        return run_infer(args, config)
    return run_sample(args, config)


if __name__ == "__main__":
    sys.exit(main())
