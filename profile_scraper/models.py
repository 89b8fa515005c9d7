from __future__ import annotations

from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

# Parsed page data: whatever json.loads produced.
JsonValue = Union[dict[str, Any], list[Any], str, int, float, bool, None]


class VideoItem(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: Optional[str] = None
    desc: str = ""
    cover: Optional[str] = None
    play_addr: Optional[str] = Field(default=None, alias="playAddr")
    download_addr: Optional[str] = Field(default=None, alias="downloadAddr")


class ScrapeResult(BaseModel):
    user: str
    count: int = Field(ge=0)
    items: List[VideoItem]

    @model_validator(mode="after")
    def _count_matches(self) -> "ScrapeResult":
        if self.count != len(self.items):
            raise ValueError("count must equal the number of items")
        return self

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)
