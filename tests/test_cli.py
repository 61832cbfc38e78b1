# ==============================================
# Tests for the CLI
# ==============================================

import json

import pytest

from schema_parser import cli


@pytest.fixture
def metadata_env(monkeypatch, tmp_path):
    """Point METADATA_DIR at a temporary directory."""
    metadata_dir = tmp_path / "metadata"
    monkeypatch.setenv("METADATA_DIR", str(metadata_dir))
    monkeypatch.delenv("STRICT_CONFLICTS", raising=False)
    monkeypatch.delenv("MONGO_COLLECTION", raising=False)
    return metadata_dir


class FakeMongoClient:
    """Stands in for schema_parser.storage.MongoClient."""

    documents = []
    queries = []

    def __init__(self, **kwargs):
        self.kwargs = kwargs

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        return False

    def sample(self, collection_name, size):
        return list(self.documents[:size])

    def find(self, collection_name, query=None, limit=0):
        self.queries.append((collection_name, query, limit))
        return [doc for doc in self.documents if all(doc.get(k) == v for k, v in query.items())][:limit]


class TestReadDocuments:

    def test_json_array(self):
        docs = cli.read_documents('[{"a": 1}, {"a": {"$numberLong": "2"}}]')
        assert len(docs) == 2

    def test_one_document_per_line(self):
        docs = cli.read_documents('{"a": 1}\n\n{"b": "x"}\n')
        assert docs == [{"a": 1}, {"b": "x"}]

    def test_empty_input(self):
        assert cli.read_documents("  \n") == []


class TestInfer:

    def test_prints_schema(self, tmp_path, capsys, metadata_env):
        source = tmp_path / "docs.jsonl"
        source.write_text('{"a": 1}\n{"a": 2}\n{"a": "x"}\n')

        exit_code = cli.main(["--log-level", "WARNING", "infer", str(source), "--indent", "0"])

        assert exit_code == 0
        schema = json.loads(capsys.readouterr().out)
        assert schema["count"] == 3
        field = schema["fields"][0]
        assert field["path"] == "a"
        assert field["values"] == [1, 2, "x"]
        assert field["unique"] == 3
        assert field["has_duplicates"] is False

    def test_writes_output_file(self, tmp_path, metadata_env):
        source = tmp_path / "docs.json"
        source.write_text('[{"name": "Berlin"}, {"name": "Berlin"}]')
        out = tmp_path / "schema.json"

        assert cli.main(["infer", str(source), "--out", str(out)]) == 0

        schema = json.loads(out.read_text())
        assert schema["fields"][0]["has_duplicates"] is True

    def test_strict_conflict_exit_code(self, tmp_path, capsys, metadata_env):
        source = tmp_path / "docs.jsonl"
        source.write_text('{"a": {"b": 1}}\n{"a": 5}\n')

        assert cli.main(["infer", str(source), "--strict"]) == 1
        assert "type conflict" in capsys.readouterr().err

    def test_missing_file(self, tmp_path, metadata_env):
        assert cli.main(["infer", str(tmp_path / "missing.json")]) == 1

    def test_invalid_json(self, tmp_path, metadata_env):
        source = tmp_path / "bad.json"
        source.write_text("{not json")
        assert cli.main(["infer", str(source)]) == 1

    def test_unsupported_value_exit_code(self, tmp_path, capsys, metadata_env):
        source = tmp_path / "docs.jsonl"
        source.write_text('{"a": 1}\n{"a": {"$minKey": 1}}\n')

        assert cli.main(["infer", str(source)]) == 1
        assert "MinKey" in capsys.readouterr().err

    def test_dbref_field(self, tmp_path, capsys, metadata_env):
        source = tmp_path / "docs.jsonl"
        source.write_text('{"owner": {"$ref": "users", "$id": 5}}\n')

        assert cli.main(["infer", str(source)]) == 0
        field = json.loads(capsys.readouterr().out)["fields"][0]
        assert field["bson_type"] == "Document"
        assert [child["path"] for child in field["schema"]["fields"]] == ["owner.$ref", "owner.$id"]


class TestSample:

    def test_sample_persists_schema(self, monkeypatch, capsys, metadata_env):
        FakeMongoClient.documents = [{"a": 1}, {"a": 2, "b": True}]
        monkeypatch.setattr(cli, "MongoClient", FakeMongoClient)

        exit_code = cli.main(["sample", "--collection", "users", "--size", "10"])

        assert exit_code == 0
        schema = json.loads(capsys.readouterr().out)
        assert schema["count"] == 2
        assert (metadata_env / "users.schema.json").exists()
        assert (metadata_env / "state.json").exists()

    def test_sample_requires_collection(self, capsys, metadata_env):
        assert cli.main(["sample"]) == 1
        assert "collection" in capsys.readouterr().err

    def test_sample_with_query_uses_find(self, monkeypatch, capsys, metadata_env):
        FakeMongoClient.documents = [{"a": 1, "b": True}, {"a": 2, "b": False}, {"a": 3, "b": True}]
        FakeMongoClient.queries = []
        monkeypatch.setattr(cli, "MongoClient", FakeMongoClient)

        exit_code = cli.main([
            "sample", "--collection", "users", "--size", "5", "--query", '{"b": true}'
        ])

        assert exit_code == 0
        assert FakeMongoClient.queries == [("users", {"b": True}, 5)]
        schema = json.loads(capsys.readouterr().out)
        assert schema["count"] == 2

    def test_sample_rejects_invalid_query(self, monkeypatch, capsys, metadata_env):
        monkeypatch.setattr(cli, "MongoClient", FakeMongoClient)
        assert cli.main(["sample", "--collection", "users", "--query", "{oops"]) == 1
        assert "--query" in capsys.readouterr().err
