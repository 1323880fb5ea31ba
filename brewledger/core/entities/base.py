"""Shared pydantic base for ledger documents."""

from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationInfo, field_validator


class LedgerModel(BaseModel):
    """
    Base for every stored record.

    Field aliases are the keys of the stored year document; Python code uses
    the field names. Both are accepted on input.
    """

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("*", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any, info: ValidationInfo) -> Any:
        # Older documents store missing text as null
        if value is None and info.field_name is not None:
            field = cls.model_fields.get(info.field_name)
            if field is not None and field.annotation is str:
                return ""
        return value

    def to_document(self) -> dict[str, Any]:
        """JSON-ready dict keyed by stored document names."""
        return self.model_dump(mode="json", by_alias=True)
