from datetime import datetime

from pydantic import BaseModel, ConfigDict


class SchoolRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    slug: str
    email: str
    created_at: datetime
