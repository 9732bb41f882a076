from pydantic import BaseModel


class BalconyVisibility(BaseModel):
    visible: bool
