from pydantic import BaseModel, ConfigDict


class StageRead(BaseModel):
    id: str
    label: str
    badge: str
    icon: str
    icon_color: str

    model_config = ConfigDict(from_attributes=True)
