# income_tracker/schemas/simple.py
from pydantic import BaseModel


class Health(BaseModel):
    status: str
    database: str


class Message(BaseModel):
    message: str
