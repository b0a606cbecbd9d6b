"""Document-database implementation of binding storage."""

from datetime import UTC, datetime

from src.commons.infrastructure.documentdb import DocumentDBBase
from src.domain.models.binding import ContentVideoBinding
from src.infrastructure.bindings.base import BindingRepositoryBase


class DocumentBindingRepository(BindingRepositoryBase):
    """Bindings kept in one collection, keyed by content ID."""

    def __init__(self, document_db: DocumentDBBase, collection: str) -> None:
        self._db = document_db
        self._collection = collection

    async def insert_if_absent(self, binding: ContentVideoBinding) -> bool:
        return await self._db.insert_if_absent(
            self._collection,
            binding.to_document(),
        )

    async def get(self, content_id: int) -> ContentVideoBinding | None:
        doc = await self._db.find_by_id(self._collection, str(content_id))
        if doc is None:
            return None
        return ContentVideoBinding.from_document(doc)

    async def find_by_asset_id(self, asset_id: str) -> ContentVideoBinding | None:
        doc = await self._db.find_one(self._collection, {"asset_id": asset_id})
        if doc is None:
            return None
        return ContentVideoBinding.from_document(doc)

    async def upsert(self, binding: ContentVideoBinding) -> ContentVideoBinding:
        if await self._db.insert_if_absent(self._collection, binding.to_document()):
            return binding

        existing = await self.get(binding.content_id)
        updated = binding.model_copy(
            update={
                "created_at": existing.created_at if existing else binding.created_at,
                "updated_at": datetime.now(UTC),
            }
        )
        await self._db.update(
            self._collection,
            str(binding.content_id),
            {
                "provider": updated.provider,
                "playback_id": updated.playback_id,
                "asset_id": updated.asset_id,
                "updated_at": updated.updated_at,
            },
        )
        return updated

    async def delete(self, content_id: int) -> bool:
        return await self._db.delete(self._collection, str(content_id))
