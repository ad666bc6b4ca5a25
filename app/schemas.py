"""
Pydantic models for the request and response bodies.

``ParameterSet`` is both the body of a generate request and, encoded
with :meth:`ParameterSet.to_key`, the key its hit counter is stored
under. The encoding is compact JSON with sorted field names, so two
logically identical requests always share one counter.
"""

import json
from typing import List

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError

from app.errors import DecodeError


class ParameterSet(BaseModel):
    """Two divisors, a limit and two labels defining one sequence."""

    model_config = ConfigDict(frozen=True)

    # int1/int2/str1/str2 are the field names older clients send.
    divisor1: int = Field(..., gt=0, strict=True, validation_alias=AliasChoices("divisor1", "int1"))
    divisor2: int = Field(..., gt=0, strict=True, validation_alias=AliasChoices("divisor2", "int2"))
    limit: int = Field(..., gt=0, strict=True)
    label1: str = Field("", validation_alias=AliasChoices("label1", "str1"))
    label2: str = Field("", validation_alias=AliasChoices("label2", "str2"))

    def to_key(self) -> str:
        return json.dumps(self.model_dump(), sort_keys=True, separators=(",", ":"), ensure_ascii=False)

    @classmethod
    def from_key(cls, key: str) -> "ParameterSet":
        try:
            return cls.model_validate_json(key)
        except ValidationError as exc:
            raise DecodeError(f"stored key {key!r} is not a valid parameter set") from exc


class GenerateResponse(BaseModel):
    result: List[str]


class StatsResponse(BaseModel):
    most_frequent_request: ParameterSet
    hits: int
