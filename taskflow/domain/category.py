"""Category domain model."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from taskflow.core.config import Constants


class Category(BaseModel):
    """Category data transfer object."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = Field(..., description="Unique category ID")
    name: str = Field(..., description="Display name, referenced by Task.category")
    color: str = Field(default=Constants.DEFAULT_CATEGORY_COLOR, description="Display color")
    task_count: int = Field(default=0, description="Informational counter, recomputed on demand")

    def to_payload(self) -> dict:
        """Serialize using the camelCase field names."""
        return self.model_dump(by_alias=True, mode="json")
