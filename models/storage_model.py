"""
Object store models - metadata and listing pages
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

DEFAULT_CONTENT_TYPE = "application/octet-stream"


class ObjectInfo(BaseModel):
    """Metadata of a stored object"""
    key: str = Field(..., description="Object key within the bucket")
    size: int = Field(..., ge=0, description="Content length in bytes")
    content_type: str = Field(default=DEFAULT_CONTENT_TYPE)
    etag: Optional[str] = None
    last_modified: Optional[datetime] = None


class ListingPage(BaseModel):
    """One page of a bucket listing"""
    keys: List[str] = Field(default_factory=list)
    next_marker: str = Field(default="", description="Continuation marker for the next page")
    is_truncated: bool = Field(default=False, description="More pages remain")
