# income_tracker/schemas/entity.py
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional

from income_tracker.db.models import EntityType


class EntityCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., min_length=1, max_length=255)
    province: str = Field(..., min_length=1, max_length=255)
    main_entity_id: Optional[str] = Field(None, alias="mainEntityId")
    type: Optional[EntityType] = None
