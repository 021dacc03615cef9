from pydantic import BaseModel, Field


class ChatRequest(BaseModel):
    message: str = Field(..., min_length=1)


class ChatResponse(BaseModel):
    response: str
    kind: str  # "answer", "echo", "run_failed", "no_response", "timed_out" or "error"
