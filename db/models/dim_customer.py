"""
db/models/dim_customer.py

Customer dimension keyed by a surrogate integer.
"""

from sqlalchemy import Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base


class DimCustomer(Base):
    __tablename__ = "dim_customers"

    customer_key: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    customer_name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    region: Mapped[str | None] = mapped_column(String(120), nullable=True)

    __table_args__ = (
        UniqueConstraint("customer_name", name="uq_dim_customers_customer_name"),
    )

    def __repr__(self) -> str:
        return f"<DimCustomer key={self.customer_key} name={self.customer_name!r}>"
