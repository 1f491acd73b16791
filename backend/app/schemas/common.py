"""
Shared pydantic base for the public JSON contract.

The widget and dashboard speak camelCase; Python code stays snake_case.
Input accepts either spelling, output is always camelCase (FastAPI
serializes response models by alias).
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )
