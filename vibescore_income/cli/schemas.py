"""Pydantic schemas for harness payload validation"""

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ScorePayload(BaseModel):
    """Decoded harness payload: a raw profile document plus option overrides"""

    model_config = ConfigDict(extra="ignore")

    data: Dict[str, Any] = Field(default_factory=dict, description="Raw profile document")
    options: Dict[str, Any] = Field(default_factory=dict, description="Engine option overrides (camelCase keys)")

    @field_validator("data", "options", mode="before")
    @classmethod
    def object_or_empty(cls, v: Any) -> Dict[str, Any]:
        """Null or non-object sections are scored as empty"""
        if isinstance(v, dict):
            return {str(key): value for key, value in v.items()}
        return {}
