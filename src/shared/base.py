from __future__ import annotations

from pydantic import BaseModel
from pydantic.config import ConfigDict


def to_camel(value: str) -> str:
    """``location_a_attainment_pct`` -> ``locationAAttainmentPct``."""
    head, *rest = value.split("_")
    return head + "".join(word[:1].upper() + word[1:] for word in rest)


class BaseSchema(BaseModel):
    """Wire schema: camelCase on the way out, snake_case accepted on the way in.

    Report payloads are values; derive changed copies with ``model_copy``.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)
