"""
Storage result models

Object-storage operations never raise across the service boundary; callers
receive one of these explicit result objects instead.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional


@dataclass
class UploadResult:
    """
    Outcome of StorageService.upload()

    On success every field except `error` is populated; on failure only
    `success=False` and `error` are meaningful.
    """
    success: bool
    file_name: str = ""
    key: str = ""
    url: str = ""
    size: int = 0
    original_name: str = ""
    mime_type: str = ""
    category: str = ""
    etag: Optional[str] = None
    error: Optional[str] = None


@dataclass
class StoredObject:
    """One listed object"""
    name: str
    key: str
    size: str
    last_modified: Optional[datetime]
    url: str
    category: str


@dataclass
class ListResult:
    """Outcome of StorageService.list(); objects are newest first"""
    success: bool
    objects: List[StoredObject] = field(default_factory=list)
    error: Optional[str] = None
