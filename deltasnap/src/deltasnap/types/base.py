"""Base model class for all deltasnap models with serialization support."""

from typing import Any, Dict
from pydantic import BaseModel, ConfigDict


class DeltaSnapBaseModel(BaseModel):
    """Base model for all deltasnap models with built-in serialization.

    Provides common functionality for all deltasnap models including:
    - Serialization to dictionary via to_dict()
    - Consistent configuration
    """
    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        validate_assignment=True
    )

    def to_dict(self) -> Dict[str, Any]:
        """Convert model to dictionary for serialization.

        Enums are emitted as their values so the result is JSON-ready.

        Returns:
            Dictionary representation suitable for JSON serialization
        """
        return self.model_dump(mode="json", by_alias=False, exclude_none=True)
