from pydantic import BaseModel, Field

class DeviceIn(BaseModel):
    token: str = Field(min_length=1, max_length=512)
