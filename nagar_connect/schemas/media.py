from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel


class UploadedFileOut(BaseModel):
    id: str
    url: str
    originalName: str
    size: int
    type: str
    uploadedAt: datetime
    uploadedBy: str


class UploadResponse(BaseModel):
    success: bool = True
    file: UploadedFileOut


class FileRefOut(BaseModel):
    id: str
    url: str


class FileRefResponse(BaseModel):
    success: bool = True
    file: FileRefOut


class ClassifyBody(BaseModel):
    imageUrl: Optional[str] = None


class AnalysisOut(BaseModel):
    suggestedCategory: str
    confidence: float
    description: str
    tags: List[str]
    timestamp: datetime


class ClassifyResponse(BaseModel):
    success: bool = True
    analysis: AnalysisOut
