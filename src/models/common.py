"""Shared base classes for catalog schemas."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CatalogModel(BaseModel):
    """Base model whose wire and storage keys are camelCase.

    Attributes stay snake_case in Python; ``model_dump(by_alias=True)``
    produces the document shape stored in MongoDB and returned by the API.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
