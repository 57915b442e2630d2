"""Kind-specific remote adapters built on ``KonnectClient``."""

from __future__ import annotations

from abc import ABC, abstractmethod
from logging import getLogger
from typing import TYPE_CHECKING, ClassVar

from planesync.domain.model import (
    Consumer,
    ConsumerGroup,
    ControlPlane,
    EntityKind,
    RemoteEntity,
    Route,
    Service,
)
from planesync.domain.ports.remote import AdapterSet

from .client import KonnectAPIError, KonnectClient
from .translator import (
    consumer_group_request,
    consumer_request,
    control_plane_request,
    route_request,
    service_request,
)

if TYPE_CHECKING:
    from planesync.config import KonnectConfig

    from .schema import KonnectBaseModel

log = getLogger(__name__)

CONTROL_PLANES_PATH = "/v2/control-planes"


class KonnectEntityAdapter[TEntity: RemoteEntity](ABC):
    """Shared request flow; subclasses supply the collection path and payload."""

    update_method: ClassVar[str] = "PUT"

    def __init__(self, client: KonnectClient) -> None:
        self.client = client

    @abstractmethod
    def _collection_path(self, entity: TEntity) -> str: ...

    @abstractmethod
    def _payload(self, entity: TEntity) -> KonnectBaseModel: ...

    def create(self, entity: TEntity, *, timeout: float | None = None) -> None:
        response = self.client.send(
            "POST",
            self._collection_path(entity),
            payload=self._payload(entity),
            timeout=timeout,
        )
        if response is None:
            raise KonnectAPIError(f"creating {entity.kind} {entity.key} returned no entity")
        entity.set_remote_id(response.id)
        entity.status.server_url = self.client.base_url
        log.debug(f"Created {entity.kind} {entity.key} with remote id {response.id}")

    def update(self, entity: TEntity, *, timeout: float | None = None) -> None:
        self.client.send(
            self.update_method,
            self._item_path(entity),
            payload=self._payload(entity),
            timeout=timeout,
        )

    def delete(self, entity: TEntity, *, timeout: float | None = None) -> None:
        self.client.send("DELETE", self._item_path(entity), timeout=timeout, missing_ok=True)

    def _item_path(self, entity: TEntity) -> str:
        return f"{self._collection_path(entity)}/{entity.remote_id}"


class _CoreEntityAdapter[TEntity: RemoteEntity](KonnectEntityAdapter[TEntity]):
    collection: ClassVar[str]

    def _collection_path(self, entity: TEntity) -> str:
        control_plane_id = entity.status.control_plane_id
        if not control_plane_id:
            raise KonnectAPIError(
                f"{entity.kind} {entity.key} is not bound to a programmed control plane"
            )
        return f"{CONTROL_PLANES_PATH}/{control_plane_id}/core-entities/{self.collection}"


class ControlPlaneAdapter(KonnectEntityAdapter[ControlPlane]):
    update_method: ClassVar[str] = "PATCH"

    def _collection_path(self, entity: ControlPlane) -> str:
        _ = entity
        return CONTROL_PLANES_PATH

    def _payload(self, entity: ControlPlane) -> KonnectBaseModel:
        return control_plane_request(entity)


class ServiceAdapter(_CoreEntityAdapter[Service]):
    collection: ClassVar[str] = "services"

    def _payload(self, entity: Service) -> KonnectBaseModel:
        return service_request(entity)


class RouteAdapter(_CoreEntityAdapter[Route]):
    collection: ClassVar[str] = "routes"

    def _payload(self, entity: Route) -> KonnectBaseModel:
        service_id = entity.status.service_id
        if not service_id:
            raise KonnectAPIError(f"{entity.kind} {entity.key} is not bound to a programmed service")
        return route_request(entity, service_id=service_id)


class ConsumerAdapter(_CoreEntityAdapter[Consumer]):
    collection: ClassVar[str] = "consumers"

    def _payload(self, entity: Consumer) -> KonnectBaseModel:
        return consumer_request(entity)


class ConsumerGroupAdapter(_CoreEntityAdapter[ConsumerGroup]):
    collection: ClassVar[str] = "consumer_groups"

    def _payload(self, entity: ConsumerGroup) -> KonnectBaseModel:
        return consumer_group_request(entity)


def build_konnect_adapters(
    config: KonnectConfig | None = None,
    *,
    client: KonnectClient | None = None,
) -> AdapterSet:
    """Bind every supported kind to its adapter over one shared client."""

    if client is None:
        client = KonnectClient(config=config) if config is not None else KonnectClient()
    return AdapterSet(
        {
            EntityKind.CONTROL_PLANE: ControlPlaneAdapter(client),
            EntityKind.SERVICE: ServiceAdapter(client),
            EntityKind.ROUTE: RouteAdapter(client),
            EntityKind.CONSUMER: ConsumerAdapter(client),
            EntityKind.CONSUMER_GROUP: ConsumerGroupAdapter(client),
        }
    )


if TYPE_CHECKING:
    from typing import cast

    from planesync.domain.ports.remote import RemoteAdapter

    _client_stub = cast("KonnectClient", object())
    _service_check: RemoteAdapter[Service] = ServiceAdapter(_client_stub)
