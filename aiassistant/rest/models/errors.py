from pydantic import BaseModel


class ErrorResponse(BaseModel):
    title: str
    message: str
    trace: str
