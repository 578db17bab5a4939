from pydantic import BaseModel

from linkpreview.app.domain.models import MetadataResult


class MetadataResponse(BaseModel):
    domain: str
    title: str | None = None
    description: str | None = None
    image: str | None = None
    price: str | None = None

    @classmethod
    def from_result(cls, result: MetadataResult) -> "MetadataResponse":
        return cls(**result.to_dict())


class PriceResponse(BaseModel):
    url: str
    domain: str
    price: str | None = None
