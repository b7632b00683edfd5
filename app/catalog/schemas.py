from typing import Optional

from pydantic import BaseModel, ConfigDict


class HabitCategoryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    kind: str
    description: str
    methods: str
    quote: Optional[str] = None
