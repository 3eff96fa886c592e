"""Export JSON schemas for the JDIHN feed envelopes."""

import json
from pathlib import Path

from pydantic import BaseModel

from jdih.app.models import AbstractFeedEnvelope, FeedEnvelope, SingleDocumentEnvelope

ENVELOPES: list[type[BaseModel]] = [FeedEnvelope, SingleDocumentEnvelope, AbstractFeedEnvelope]


def export_schemas(schemas_dir: Path) -> list[Path]:
    """Write one <Model>.schema.json per envelope into schemas_dir."""
    schemas_dir.mkdir(parents=True, exist_ok=True)

    written = []
    for model in ENVELOPES:
        path = schemas_dir / f"{model.__name__}.schema.json"
        with open(path, "w", encoding="utf-8") as f:
            json.dump(model.model_json_schema(), f, indent=2, ensure_ascii=False)
        written.append(path)
    return written


def main() -> None:
    """Export schemas to docs/schemas/."""
    for path in export_schemas(Path("docs/schemas")):
        print(f"Exported schema to {path}")


if __name__ == "__main__":
    main()
