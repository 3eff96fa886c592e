"""Test JSON schema export of the JDIHN envelopes."""

import json
from pathlib import Path

from scripts.export_schemas import export_schemas


def test_one_schema_per_envelope(tmp_path: Path) -> None:
    written = export_schemas(tmp_path)

    assert sorted(path.name for path in written) == [
        "AbstractFeedEnvelope.schema.json",
        "FeedEnvelope.schema.json",
        "SingleDocumentEnvelope.schema.json",
    ]
    assert all(path.exists() for path in written)


def test_feed_schema_describes_links(tmp_path: Path) -> None:
    export_schemas(tmp_path)

    schema = json.loads((tmp_path / "FeedEnvelope.schema.json").read_text(encoding="utf-8"))

    assert schema["title"] == "FeedEnvelope"
    assert set(schema["required"]) == {"meta", "data", "links"}
    assert "JdihnRecord" in schema["$defs"]
    assert "FeedLinks" in schema["$defs"]
