"""
Shared pieces of the request/response models.
"""
from typing import Annotated, Any, ClassVar, Dict, Tuple

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, model_validator
from pydantic_core import PydanticCustomError


def _reject_blank(value: str) -> str:
    if not value.strip():
        raise PydanticCustomError("blank_string", "Value cannot be blank")
    return value


# Required text: stored exactly as sent, but empty or whitespace-only is refused
RequiredText = Annotated[str, AfterValidator(_reject_blank)]


class ReadModel(BaseModel):
    """Response model populated straight from ORM rows."""
    model_config = ConfigDict(from_attributes=True)


class CreateModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class PatchModel(BaseModel):
    """
    Body of a PATCH request: the row id plus any subset of mutable fields.

    Fields left out of the body are not part of `changes()`, so the stored
    value is kept. An explicit null clears a nullable column; for columns
    listed in `non_nullable` it is rejected.
    """
    model_config = ConfigDict(extra="ignore")

    non_nullable: ClassVar[Tuple[str, ...]] = ()

    id: str = Field(..., min_length=1)

    @model_validator(mode="after")
    def _reject_null_required(self):
        for name in self.non_nullable:
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self

    def changes(self) -> Dict[str, Any]:
        return self.model_dump(exclude_unset=True, exclude={"id"})
