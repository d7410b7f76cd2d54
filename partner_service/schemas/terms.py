from pydantic import BaseModel, Field


class TermsAndConditionsUpdate(BaseModel):
    name: str | None = None
    description: str | None = None
    language: str | None = None


class TermsAndConditionsItem(BaseModel):
    id: int
    name: str
    description: str
    language: str


class TermsAndConditions(BaseModel):
    partner_id: str
    items: list[TermsAndConditionsItem] = Field(default_factory=list)
