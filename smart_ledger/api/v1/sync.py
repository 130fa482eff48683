"""Write-through of changed collections to the remote document store"""

import logging

from fastapi import BackgroundTasks

from smart_ledger.domain.exceptions import DocumentStoreError
from smart_ledger.infrastructure.clients.document_store import DocumentStoreClient, collection_documents
from smart_ledger.services.ledger_service import LedgerService

logger = logging.getLogger(__name__)


async def _push(store: DocumentStoreClient, owner_id: str, collection: str, documents) -> None:
    try:
        await store.push_collection(owner_id, collection, documents)
    except DocumentStoreError as e:
        # The local commit already succeeded; the next write for this collection resends it
        logger.warning(f"Document store out of date: {e}", extra={"owner_id": owner_id, "collection": collection})


def schedule_sync(
    background_tasks: BackgroundTasks,
    store: DocumentStoreClient,
    service: LedgerService,
    owner_id: str,
    *collections: str,
) -> None:
    """Queue a snapshot push for each changed collection after the response is sent"""
    if not store.enabled:
        return
    snapshot = service.snapshot(owner_id)
    for collection in collections:
        background_tasks.add_task(_push, store, owner_id, collection, collection_documents(snapshot, collection))
