"""Export JSON schemas for PlanRequest, TravelPlan and TripLegCreate."""

import json
from pathlib import Path

from pydantic import BaseModel

from backend.app.models import PlanRequest, TravelPlan, TripLegCreate

SCHEMA_MODELS: dict[str, type[BaseModel]] = {
    "PlanRequest": PlanRequest,
    "TravelPlan": TravelPlan,
    "TripLegCreate": TripLegCreate,
}


def main() -> None:
    """Export schemas to docs/schemas/."""
    schemas_dir = Path("docs/schemas")
    schemas_dir.mkdir(parents=True, exist_ok=True)

    for name, model in SCHEMA_MODELS.items():
        path = schemas_dir / f"{name}.schema.json"
        with open(path, "w") as f:
            json.dump(model.model_json_schema(), f, indent=2)
        print(f"Exported {name} schema to {path}")


if __name__ == "__main__":
    main()
