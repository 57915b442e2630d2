"""Pydantic models describing the remote control-plane API payloads."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class KonnectBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class ControlPlaneRequest(KonnectBaseModel):
    name: str
    description: str | None = None
    cluster_type: str | None = None
    auth_type: str | None = None
    labels: dict[str, str] = Field(default_factory=dict[str, str])


class ServiceRequest(KonnectBaseModel):
    name: str | None = None
    host: str
    port: int
    protocol: str
    path: str | None = None
    retries: int | None = None
    connect_timeout: int | None = None
    read_timeout: int | None = None
    write_timeout: int | None = None
    enabled: bool = True
    tags: list[str] = Field(default_factory=list[str])


class EntityRef(KonnectBaseModel):
    id: str


class RouteRequest(KonnectBaseModel):
    name: str | None = None
    paths: list[str] | None = None
    methods: list[str] | None = None
    hosts: list[str] | None = None
    protocols: list[str]
    strip_path: bool
    preserve_host: bool
    tags: list[str] = Field(default_factory=list[str])
    service: EntityRef


class ConsumerRequest(KonnectBaseModel):
    username: str | None = None
    custom_id: str | None = None
    tags: list[str] = Field(default_factory=list[str])


class ConsumerGroupRequest(KonnectBaseModel):
    name: str
    tags: list[str] = Field(default_factory=list[str])


class EntityResponse(KonnectBaseModel):
    """Common subset of every create/update answer."""

    id: str


class ErrorResponse(KonnectBaseModel):
    status: int | None = None
    title: str | None = None
    message: str | None = None
    detail: str | None = None

    def describe(self) -> str | None:
        return self.detail or self.message or self.title
