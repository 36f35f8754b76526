from pydantic import BaseModel, ConfigDict


class MessageResponse(BaseModel):
    message: str


class ChildRefResponse(BaseModel):
    id: int
    name: str | None = None

    model_config = ConfigDict(from_attributes=True)
