# docnum/schemas/document_schema.py

from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class GenerateDocumentRequest(BaseModel):
    """Body of POST /api/generate-document. Presence of fields is checked by the allocator."""

    document_type: Optional[str] = Field(None, alias="type", max_length=20)
    department: Optional[str] = Field(None, max_length=10)
    subject: Optional[str] = None
    recipient: Optional[str] = Field(None, max_length=255)
    content: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True)


class ResetCounterRequest(BaseModel):
    department: Optional[str] = None
    document_type: Optional[str] = Field(None, alias="type")
    year: Optional[Union[int, str]] = None

    model_config = ConfigDict(populate_by_name=True)
