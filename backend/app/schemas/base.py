"""Base schema utilities."""

from datetime import datetime
from typing import ClassVar, FrozenSet, Optional

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel


class BaseSchema(BaseModel):
    """Base schema with common configuration.

    Fields are snake_case in Python and camelCase on the wire; input accepts
    either spelling. Unknown keys are ignored.
    """

    model_config = ConfigDict(
        from_attributes=True,
        str_strip_whitespace=True,
        validate_assignment=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class UpdateSchema(BaseSchema):
    """Partial update body.

    Every field is optional so that ``model_dump(exclude_unset=True)`` yields
    only what the caller sent. Fields named in ``non_nullable`` may be left
    out but not sent as an explicit null.
    """

    non_nullable: ClassVar[FrozenSet[str]] = frozenset()

    @model_validator(mode="after")
    def reject_explicit_nulls(self):
        for name in self.model_fields_set & self.non_nullable:
            if getattr(self, name) is None:
                raise ValueError(f"{to_camel(name)} may not be null")
        return self


class TimestampMixin(BaseSchema):
    """Mixin for created_at/updated_at timestamps."""

    created_at: datetime
    updated_at: Optional[datetime] = None


class IDMixin(BaseSchema):
    """Mixin for integer id field."""

    id: int
