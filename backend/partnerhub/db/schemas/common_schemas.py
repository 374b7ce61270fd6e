# partnerhub/db/schemas/common_schemas.py
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional

class DocModel(BaseModel):
    """Base for MongoDB documents keyed by an opaque string `_id`."""
    id: str = Field(..., alias="_id")

    model_config = ConfigDict(populate_by_name=True)


class ActionResult(BaseModel):
    """Binary outcome returned by back-office actions; `error` is shown to the user verbatim."""
    success: bool
    message: Optional[str] = None
    error: Optional[str] = None
