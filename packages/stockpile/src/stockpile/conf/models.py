# stockpile/conf/models.py

import hashlib
from typing import Literal

from pydantic import BaseModel, ConfigDict, field_validator


class StockpileSettings(BaseModel):
    model_config = ConfigDict(extra="allow", frozen=True)

    KEY_DIGEST: str = "sha256"
    CLONE_MODE: Literal["deep", "shallow"] = "deep"
    STRICT_TYPE_IDS: bool = False

    @field_validator("KEY_DIGEST")
    @classmethod
    def _known_digest(cls, value: str) -> str:
        name = value.strip().lower()
        if name not in hashlib.algorithms_guaranteed:
            raise ValueError(
                f"unsupported digest {value!r}; expected one of {sorted(hashlib.algorithms_guaranteed)}"
            )
        # shake_* digests need an explicit length
        if name.startswith("shake_"):
            raise ValueError(f"variable-length digest {value!r} cannot be used for registry keys")
        return name
