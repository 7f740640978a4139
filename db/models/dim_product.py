"""
db/models/dim_product.py

Product dimension keyed by a surrogate integer.
"""

from sqlalchemy import Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base


class DimProduct(Base):
    __tablename__ = "dim_products"

    product_key: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    product_name: Mapped[str] = mapped_column(String(255), nullable=False)
    category: Mapped[str | None] = mapped_column(String(120), nullable=True)
    sub_category: Mapped[str | None] = mapped_column(String(120), nullable=True)

    __table_args__ = (
        UniqueConstraint("product_name", name="uq_dim_products_product_name"),
    )

    def __repr__(self) -> str:
        return f"<DimProduct key={self.product_key} name={self.product_name!r}>"
