"""
SQLAlchemy Database Models

Two collections: users (with their cart) and orders.
"""

from sqlalchemy import JSON, Boolean, Column, DateTime, Float, ForeignKey, Integer, String
from sqlalchemy.sql import func

from tomato.database import Base


class User(Base):
    """
    Registered customer.

    cart_data maps an item key to its quantity and is reset to {} whenever
    an order is placed.
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password = Column(String(100), nullable=False)  # bcrypt hash
    cart_data = Column(JSON, nullable=False, default=dict)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<User #{self.id} - {self.email}>"


class Order(Base):
    """
    Placed order. payment is only ever True for orders created after a
    verified Razorpay signature.
    """
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    items = Column(JSON, nullable=False)  # [{name, price, quantity, ...}]
    amount = Column(Float, nullable=False)
    address = Column(JSON, nullable=False)

    payment = Column(Boolean, nullable=False, default=False)
    razorpay_order_id = Column(String(100), nullable=True)
    razorpay_payment_id = Column(String(100), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)

    def __repr__(self):
        return f"<Order #{self.id} - user {self.user_id} - paid={self.payment}>"
