"""
Domain models for the posts exporter.

Defines the `Post` record fetched from the source endpoint. Incoming field
names are matched case-insensitively; JSON output uses camelCase keys while
CSV headers and database columns use PascalCase.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

CSV_COLUMNS: List[str] = ["UserId", "Id", "Title", "Body", "HashId"]


def _normalize_key(key: str) -> str:
    return key.replace("_", "").lower()


class Post(BaseModel):
    """
    Representation of a single post, plus the generated `hash_id`.
    """

    user_id: int = Field(
        ..., strict=True, serialization_alias="userId", description="Owner identifier."
    )
    id: int = Field(..., strict=True, description="Record identifier.")
    title: str = Field(..., strict=True, description="Post title.")
    body: str = Field(..., strict=True, description="Post body text.")
    hash_id: Optional[str] = Field(
        None,
        serialization_alias="hashId",
        description="Generated identifier, assigned after fetch.",
    )

    model_config = ConfigDict(extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def _match_keys_case_insensitively(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        lookup = {_normalize_key(name): name for name in cls.model_fields}
        matched: Dict[str, Any] = {}
        for key, value in data.items():
            field_name = lookup.get(_normalize_key(str(key)))
            if field_name is not None:
                matched[field_name] = value
        return matched

    @staticmethod
    def csv_header() -> List[str]:
        return list(CSV_COLUMNS)

    def as_row(self) -> List[Any]:
        """Values in `CSV_COLUMNS` order."""
        return [self.user_id, self.id, self.title, self.body, self.hash_id]

    def as_params(self) -> Dict[str, Any]:
        """Named parameters for the `Posts` INSERT statement."""
        return dict(zip(CSV_COLUMNS, self.as_row()))

    def to_json_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


__all__ = ["CSV_COLUMNS", "Post"]
