# edumanage/schemas/common/requests.py
from typing import ClassVar, FrozenSet

from pydantic import BaseModel, model_validator
from pydantic_core import PydanticCustomError


class PartialUpdate(BaseModel):
    """
    Base for PATCH bodies: omitted fields are left unchanged, but fields
    listed in NON_NULLABLE may not be sent as an explicit null.
    """
    NON_NULLABLE: ClassVar[FrozenSet[str]] = frozenset()

    @model_validator(mode="after")
    def reject_null_for_required_columns(self):
        for name in sorted(self.model_fields_set & self.NON_NULLABLE):
            if getattr(self, name) is None:
                raise PydanticCustomError("not_null", "{field} may not be null", {"field": name})
        return self
