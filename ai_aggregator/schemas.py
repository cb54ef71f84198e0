from __future__ import annotations
import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from jsonschema import Draft202012Validator
from pydantic import BaseModel, ConfigDict, Field

SCHEMAS_DIR = Path(__file__).resolve().parent / "contracts"


class ProviderResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    provider: str
    response: str = ""
    error: Optional[str] = None
    response_time: int = Field(default=0, ge=0, alias="responseTime")

    @property
    def failed(self) -> bool:
        return self.error is not None


class AggregateResponse(BaseModel):
    success: bool = True
    responses: List[ProviderResult]
    timestamp: str

    def to_wire(self) -> Dict[str, Any]:
        # "error" only appears on failed entries
        return self.model_dump(by_alias=True, exclude_none=True)


class ErrorBody(BaseModel):
    error: str


class ProviderInfo(BaseModel):
    name: str
    model: str
    simulated: bool


class Health(BaseModel):
    status: str


class VersionInfo(BaseModel):
    version: str
    providers: List[str]
    credentials: Dict[str, bool]
    max_output_tokens: int


class ResponseValidator:
    """Checks documents against the shipped JSON schemas."""

    def __init__(self, schemas_dir: Path = SCHEMAS_DIR):
        self._schemas = {}
        for name in ["aggregate_response"]:
            path = Path(schemas_dir) / f"{name}.schema.json"
            with open(path, "r", encoding="utf-8") as f:
                schema = json.load(f)
                self._schemas[name] = Draft202012Validator(schema)

    def validate(self, name: str, data: Any) -> list[str]:
        if name not in self._schemas:
            raise KeyError(f"Unknown schema {name}")
        validator = self._schemas[name]
        errors = sorted(validator.iter_errors(data), key=lambda e: [str(p) for p in e.path])
        return [f"{'/'.join(map(str, e.path))}: {e.message}" for e in errors]
