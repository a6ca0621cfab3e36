"""Item Schemas: Pydantic models for the /api/items boundary.

Invariants:
    - description: 1-255 chars, measured after stripping surrounding whitespace
    - ItemUpdate carries only the fields the client sent (partial merge)
    - Explicit null in ItemUpdate is rejected, omission is not
"""

from typing import Annotated

from pydantic import BaseModel, StringConstraints, ValidationInfo, field_validator

Description = Annotated[
    str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255),
]


class ItemCreate(BaseModel):
    """Item creation payload."""
    description: Description
    completed: bool = False


class ItemUpdate(BaseModel):
    """Partial item update; unset fields are left untouched."""
    description: Description | None = None
    completed: bool | None = None

    @field_validator("description", "completed")
    @classmethod
    def reject_null(cls, v, info: ValidationInfo):
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return v

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


class ItemResponse(BaseModel):
    id: str
    description: str
    completed: bool


class GreetingResponse(BaseModel):
    greeting: str
