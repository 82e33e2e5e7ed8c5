"""Base class for models persisted as flat MongoDB documents."""

from typing import Any, Dict, Mapping, Type, TypeVar

from pydantic import BaseModel, ConfigDict

DocumentT = TypeVar("DocumentT", bound="DocumentModel")


class DocumentModel(BaseModel):
    """Pydantic model with conversions to and from BSON-ready dicts.

    Identity lives in the ``id`` field; MongoDB's own ``_id`` is dropped on read.
    """

    model_config = ConfigDict(extra="ignore", use_enum_values=True)

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")

    @classmethod
    def from_document(cls: Type[DocumentT], document: Mapping[str, Any]) -> DocumentT:
        data = dict(document)
        data.pop("_id", None)
        return cls.model_validate(data)
