"""Standalone mock Resend API for local development and testing.

Run standalone: uvicorn tests.mocks.fake_resend:app --port 8025
"""

import uuid

from fastapi import FastAPI, Header, HTTPException
from pydantic import BaseModel, Field

app = FastAPI(title="Fake Resend")

VALID_API_KEY = "re_test_key"

sent_messages: list[dict] = []


class _SendRequest(BaseModel):
    sender: str = Field(alias="from")
    to: list[str]
    subject: str
    html: str


@app.post("/emails")
async def send_email(request: _SendRequest, authorization: str = Header(default="")):
    if authorization != f"Bearer {VALID_API_KEY}":
        raise HTTPException(status_code=401, detail="API key is invalid")
    if any("@" not in address for address in request.to):
        raise HTTPException(status_code=422, detail="Invalid `to` field")

    message_id = str(uuid.uuid4())
    sent_messages.append({"id": message_id, **request.model_dump(by_alias=True)})
    return {"id": message_id}
