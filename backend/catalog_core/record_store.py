"""Record store: list/create/update/delete of locations over a document transport."""
from typing import Any, Mapping

from catalog_core.location import Location, location_from_document
from catalog_core.transport import DocumentTransport

ORDER_KEY = "order"


class RecordStore:
    """
    Thin adapter over the document transport for one collection.

    No caching and no retries: every call is one round trip and failures
    (StoreConnectionError, StorePermissionError, NotFoundError, ValidationError)
    propagate unchanged. Payloads are not validated here.
    """

    def __init__(self, transport: DocumentTransport, collection: str = "locations") -> None:
        self._transport = transport
        self.collection = collection

    def list(self) -> list[Location]:
        """All locations sorted ascending by order; bad fields get defaults."""
        documents = self._transport.list_documents(self.collection, order_by=ORDER_KEY)
        return [location_from_document(doc.id, doc.data) for doc in documents]

    def create(self, fields: Mapping[str, Any]) -> None:
        """Insert a new location; the store assigns the id."""
        self._transport.insert(self.collection, _payload(fields))

    def update(self, location_id: str, partial: Mapping[str, Any]) -> None:
        """Merge the given fields into an existing location."""
        self._transport.merge(self.collection, location_id, _payload(partial))

    def delete(self, location_id: str) -> None:
        self._transport.delete(self.collection, location_id)


def _payload(fields: Mapping[str, Any]) -> dict[str, Any]:
    """Write payload: everything but the id."""
    return {key: value for key, value in fields.items() if key != "id"}
