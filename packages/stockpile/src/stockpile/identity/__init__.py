from .exceptions import IdentityError, IdentityValidationError
from .utils import (
    TYPE_ID_INSTANCE_MARK,
    TYPE_ID_SEPARATOR,
    build_name,
    is_private_name,
    resolves_by_name,
    split_type_id,
    type_id_for,
)

__all__ = [
    "IdentityError",
    "IdentityValidationError",
    "TYPE_ID_INSTANCE_MARK",
    "TYPE_ID_SEPARATOR",
    "build_name",
    "is_private_name",
    "resolves_by_name",
    "split_type_id",
    "type_id_for",
]
