from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Literal, Optional

class MenuItem(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: str
    description: Optional[str] = None
    allergens: List[str] = Field(default_factory=list, description="Allergen names from the controlled vocabulary")
    dietary: List[str] = Field(default_factory=list, description="Dietary flags, e.g. vegetar, vegansk")
    notes: Optional[str] = None

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("title must not be blank")
        return value

class NormalizedMenu(BaseModel):
    model_config = ConfigDict(extra="forbid")

    language: str
    weekday: Optional[str] = Field(None, description="Weekday the items belong to, as written on the page")
    items: List[MenuItem]
    pretty_text: str

class NormalizationResult(BaseModel):
    summary: str = ""
    menu: Optional[NormalizedMenu] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.menu is not None

class PublishedImage(BaseModel):
    url: str
    key: str

class NotificationResult(BaseModel):
    channel: Optional[Literal["api", "webhook"]] = None
    message_ts: Optional[str] = Field(None, description="Message id of the primary post, used for threading")
    delivered: bool = False
    threaded: bool = False
    errors: List[str] = Field(default_factory=list)

class RunReport(BaseModel):
    weekday: Optional[str]
    summary: str
    source: Literal["schema", "structural", "ai", "none"]
    prompt: str
    image: PublishedImage
    notification: NotificationResult
