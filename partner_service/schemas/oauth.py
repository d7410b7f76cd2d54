from pydantic import BaseModel


class PartnerOAuthCredential(BaseModel):
    client_id: str
    client_secret: str
    provider_id: str = ""
    partner_id: str | None = None


class PartnerOAuthHeader(BaseModel):
    provider_name: str = ""
