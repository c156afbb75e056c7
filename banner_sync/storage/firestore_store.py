import logging
from typing import Any, Dict, List, Optional

from google.api_core.exceptions import NotFound
from google.cloud import firestore
from pydantic import ValidationError

from banner_sync.schemas import BannerRecord
from banner_sync.storage.base import BannerNotFoundError

logger = logging.getLogger(__name__)

DEFAULT_ACTOR = "sync"


def get_firestore_client(
    project_id: Optional[str] = None, database_name: Optional[str] = None
) -> firestore.Client:
    try:
        if database_name:
            client = firestore.Client(project=project_id, database=database_name)
            logger.info("Firestore client initialized for database: %s", database_name)
        else:
            client = firestore.Client(project=project_id)
            logger.info("Firestore client initialized for default database.")
    except Exception as e:
        logger.error("Could not initialize Firestore client. Error: %s", e, exc_info=True)
        raise RuntimeError(f"Failed to initialize Firestore: {e}") from e
    return client


class FirestoreBannerStore:
    """Banner records kept in the site's ``sport-banners`` collection."""

    def __init__(
        self,
        client: firestore.Client,
        collection: str = "sport-banners",
        actor: str = DEFAULT_ACTOR,
    ):
        self.client = client
        self.collection = collection
        self.actor = actor

    def _collection(self):
        return self.client.collection(self.collection)

    def list_all_banners(self) -> List[BannerRecord]:
        query = self._collection().order_by("date", direction=firestore.Query.DESCENDING)
        records: List[BannerRecord] = []
        for doc in query.stream():
            data = doc.to_dict() or {}
            data["id"] = doc.id
            try:
                records.append(BannerRecord.model_validate(data))
            except ValidationError as e:
                if data.get("isEnabled") is True:
                    # Still occupies the live slot; the next update rewrites its fields.
                    logger.warning("Malformed enabled banner document %s kept as active: %s", doc.id, e)
                    records.append(BannerRecord(id=doc.id, is_enabled=True))
                else:
                    logger.warning("Skipping malformed banner document %s: %s", doc.id, e)
        return records

    def create_banner(self, fields: Dict[str, Any]) -> str:
        doc_ref = self._collection().document()
        doc_ref.set(
            {
                **fields,
                "lastUpdated": firestore.SERVER_TIMESTAMP,
                "createdBy": self.actor,
                "updatedBy": self.actor,
            }
        )
        logger.debug("Created banner document %s", doc_ref.id)
        return doc_ref.id

    def update_banner(self, banner_id: str, fields: Dict[str, Any]) -> None:
        doc_ref = self._collection().document(banner_id)
        try:
            doc_ref.update(
                {
                    **fields,
                    "lastUpdated": firestore.SERVER_TIMESTAMP,
                    "updatedBy": self.actor,
                }
            )
        except NotFound as e:
            raise BannerNotFoundError(banner_id) from e

    def delete_banner(self, banner_id: str) -> None:
        self._collection().document(banner_id).delete()
