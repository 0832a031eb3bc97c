from pydantic import BaseModel
from typing import Optional


class AuthIdentity(BaseModel):
    id: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    image_url: Optional[str] = None
