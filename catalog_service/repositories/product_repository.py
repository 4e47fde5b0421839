"""JSON-file-backed product repository."""

from typing import Any, Dict, List, Mapping, Optional

from ..domain.entities import Clock, IdFactory, ProductRecord, merge_patch, new_id, utc_now
from ..exceptions import NotFoundException, StorageException
from ..logging_config import get_logger
from .record_store import JsonRecordStore

logger = get_logger(__name__)


def _to_product(document: Dict[str, Any]) -> ProductRecord:
    try:
        return ProductRecord.from_document(document)
    except (KeyError, TypeError, ValueError) as e:
        raise StorageException("products", "decode", "malformed product record") from e


class ProductRepository:
    """Product records persisted in a single `products` collection document."""

    def __init__(
        self,
        store: JsonRecordStore,
        id_factory: IdFactory = new_id,
        clock: Clock = utc_now,
    ) -> None:
        self.store = store
        self._id_factory = id_factory
        self._clock = clock

    async def find_by_id(self, product_id: str) -> Optional[ProductRecord]:
        for document in await self.store.read():
            if document.get("id") == product_id:
                return _to_product(document)
        return None

    async def find_by_category(self, category: str) -> List[ProductRecord]:
        """Products whose category matches exactly, in insertion order."""
        return [
            _to_product(document)
            for document in await self.store.read()
            if document.get("category") == category
        ]

    async def get_all(self) -> List[ProductRecord]:
        return [_to_product(document) for document in await self.store.read()]

    async def create(
        self,
        name: str,
        description: str,
        price: float,
        category: str,
        stock: int = 0,
    ) -> ProductRecord:
        product = ProductRecord(
            id=self._id_factory(),
            name=name,
            description=description,
            price=price,
            category=category,
            stock=stock,
            created_at=self._clock(),
        )
        async with self.store.mutate() as records:
            records.append(product.to_document())
        logger.info("Product created", product_id=product.id, category=category)
        return product

    async def update(self, product_id: str, fields: Mapping[str, Any]) -> ProductRecord:
        """
        Merge-patch a product. A provided price or stock of 0 is applied.

        Raises:
            NotFoundException: If no product has this id
        """
        async with self.store.mutate() as records:
            for index, document in enumerate(records):
                if document.get("id") == product_id:
                    updated = merge_patch(_to_product(document), fields)
                    records[index] = updated.to_document()
                    break
            else:
                raise NotFoundException("Product", product_id)
        logger.info("Product updated", product_id=product_id, fields=sorted(fields))
        return updated

    async def delete(self, product_id: str) -> bool:
        """Remove a product. Returns False when no product had this id."""
        async with self.store.mutate() as records:
            remaining = [document for document in records if document.get("id") != product_id]
            removed = len(remaining) != len(records)
            records[:] = remaining
        if removed:
            logger.info("Product deleted", product_id=product_id)
        return removed
