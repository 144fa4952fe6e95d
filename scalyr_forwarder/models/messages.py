"""
Pydantic models for outbound Scalyr messages and HTTP exchanges
"""

from typing import Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class EventAttributes(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    cw_stream: str = Field(..., alias='cwStream')
    cw_id: str = Field(..., alias='cwId')
    message: str


class ScalyrEvent(BaseModel):
    ts: str = Field(..., description="Event time, millisecond timestamp padded with six zeros")
    type: int = 0
    sev: int = 3
    attrs: EventAttributes


class SessionInfo(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    server_host: str = Field(..., alias='serverHost')
    logfile: str
    parser: str


class AddEventsMessage(BaseModel):
    """Structured event batch for the Scalyr addEvents API"""
    model_config = ConfigDict(populate_by_name=True)

    token: str
    session: str
    session_info: SessionInfo = Field(..., alias='sessionInfo')
    events: List[ScalyrEvent]

    def to_document(self) -> Dict:
        return self.model_dump(by_alias=True)


class UploadLogsMessage(BaseModel):
    """
    Plain-text upload for the Scalyr uploadLogs API.

    token, host, logfile and log_stream are already URL-encoded; body is not.
    """
    token: str
    host: str
    logfile: str
    log_stream: str
    body: str


ScalyrMessage = Union[AddEventsMessage, UploadLogsMessage]


class OutgoingRequest(BaseModel):
    """A ready-to-send HTTP request"""
    method: Literal['POST'] = 'POST'
    url: str
    headers: Dict[str, str]
    body: str


class HttpResponse(BaseModel):
    """Outcome of an HTTP exchange where the server answered"""
    status_code: int
    body: Optional[str] = None
    error: Optional[str] = None
