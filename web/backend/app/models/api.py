"""Pydantic models for collector request/response serialization."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ViolationReportRequest(BaseModel):
    """The normalized payload a deployed page forwards."""

    model_config = ConfigDict(populate_by_name=True)

    blocked_uri: str = Field("", alias="blockedURI", max_length=2048)
    violated_directive: str = Field("", alias="violatedDirective", max_length=256)
    timestamp: str = Field("", max_length=64)
    user_agent: str = Field("", alias="userAgent", max_length=512)


class ViolationRecordResponse(BaseModel):
    """Mirrors inputdefense.reporting.violation_log.ViolationRecord."""

    id: str
    received_at: str
    blocked_uri: str = ""
    violated_directive: str = ""
    timestamp: str = ""
    user_agent: str = ""
    client_ip: str = ""
