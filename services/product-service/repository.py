import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from models import Product
from schemas import ProductCreate, ProductSchema, ProductUpdate

logger = logging.getLogger(__name__)


class ProductRepository:
    """Repository for product rows. Returns ProductSchema values, never ORM objects."""

    def __init__(self, db: AsyncSession):
        """Initialize with database session."""
        self.db = db

    async def _get(self, product_id: int) -> Optional[Product]:
        return await self.db.get(Product, product_id)

    async def _commit(self, product: Product) -> ProductSchema:
        await self.db.commit()
        # Pick up server-side timestamps
        await self.db.refresh(product)
        return ProductSchema.model_validate(product)

    async def list_products(self) -> List[ProductSchema]:
        """List all products, newest id first."""
        result = await self.db.execute(select(Product).order_by(Product.id.desc()))
        return [ProductSchema.model_validate(p) for p in result.scalars().all()]

    async def get_product(self, product_id: int) -> Optional[ProductSchema]:
        """Get product by ID."""
        product = await self._get(product_id)
        return ProductSchema.model_validate(product) if product else None

    async def create_product(self, data: ProductCreate) -> ProductSchema:
        """Create a new product."""
        product = Product(name=data.name, price=data.price, availability=data.availability)
        self.db.add(product)
        created = await self._commit(product)
        logger.info(f"Created product {created.id}: {created.name}, price: {created.price}")
        return created

    async def replace_product(self, product_id: int, data: ProductUpdate) -> Optional[ProductSchema]:
        """Overwrite every mutable field. Returns None if the product does not exist."""
        product = await self._get(product_id)
        if not product:
            return None

        product.name = data.name
        product.price = data.price
        product.availability = data.availability
        updated = await self._commit(product)
        logger.info(f"Updated product {product_id}")
        return updated

    async def toggle_availability(self, product_id: int) -> Optional[ProductSchema]:
        """Flip availability. Returns None if the product does not exist."""
        product = await self._get(product_id)
        if not product:
            return None

        product.availability = not product.availability
        updated = await self._commit(product)
        logger.info(f"Product {product_id} availability set to {updated.availability}")
        return updated

    async def delete_product(self, product_id: int) -> bool:
        """Hard delete. Returns False if the product does not exist."""
        product = await self._get(product_id)
        if not product:
            return False

        await self.db.delete(product)
        await self.db.commit()
        logger.info(f"Deleted product {product_id}")
        return True
