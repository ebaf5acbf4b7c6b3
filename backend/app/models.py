from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, field_validator


class CalendarEvent(BaseModel):
    model_config = ConfigDict(extra="ignore")

    title: Optional[str] = None
    date: Optional[str] = None  # YYYY-MM-DD expected, not enforced
    time: Optional[str] = None  # HH:MM (24h) expected, not enforced
    location: Optional[str] = None
    description: Optional[str] = None

    @field_validator("title", "date", "time", "location", "description", mode="before")
    @classmethod
    def scalar_to_str(cls, v: Any) -> Any:
        # extraction passes records through untouched, so numbers can come back here
        if isinstance(v, (bool, int, float)):
            return str(v)
        return v


class ExtractRequest(BaseModel):
    fileData: Optional[str] = None  # data URL or bare base64
    fileName: Optional[str] = None
    mimeType: Optional[str] = None


class ExtractResponse(BaseModel):
    # records pass through as the model returned them
    events: List[Any]
