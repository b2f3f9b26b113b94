# backend/schemas/common.py
from typing import Any, Dict, Generic, Optional, Type, TypeVar
from pydantic import BaseModel, ConfigDict

T = TypeVar("T")


# Base configuration for ORM compatibility
class ORMBase(BaseModel):
    model_config = ConfigDict(from_attributes=True)


# Canonical response envelope shared by every endpoint
class Envelope(BaseModel, Generic[T]):
    code: int = 200
    status: str = "success"
    message: str
    data: Optional[T] = None


# A ledger reference. resolved=False means the referenced row no longer exists.
class ReferenceOut(BaseModel):
    id: Optional[int] = None
    resolved: bool
    data: Optional[Dict[str, Any]] = None


def envelope(data=None, message="OK", code=200) -> dict:
    return {"code": code, "status": "success", "message": message, "data": data}


def provided_fields(payload: BaseModel, nullable=()) -> dict:
    """Fields the client actually sent. Explicit nulls are kept only for nullable columns."""
    return {
        key: value
        for key, value in payload.model_dump(exclude_unset=True).items()
        if value is not None or key in nullable
    }


def reference(ref_id: Optional[int], obj: Any, schema: Type[BaseModel]) -> Optional[ReferenceOut]:
    """Resolve a stored id and its loaded relationship into a ReferenceOut.

    Returns None when the reference was never set.
    """
    if ref_id is None:
        return None
    if obj is None:
        return ReferenceOut(id=ref_id, resolved=False)
    return ReferenceOut(id=ref_id, resolved=True, data=schema.model_validate(obj).model_dump(mode="json"))
