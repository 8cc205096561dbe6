"""
Cart & Checkout Routes
========================
JSON API over the cart service: view, add, update, delete, checkout.
Business errors propagate as QKartError and are rendered by main.py.
"""

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from config.database import get_db
from modules.auth.deps import require_login
from modules.cart.service import cart_service
from modules.checkout.service import checkout_service

router = APIRouter(prefix="/api/cart", tags=["cart"])


# ==========================================
# Schemas
# ==========================================

class AddProductRequest(BaseModel):
    productId: int
    quantity: int = Field(..., gt=0)


class UpdateProductRequest(BaseModel):
    productId: int
    quantity: int = Field(..., ge=0)


# ==========================================
# 🛒 View Cart
# ==========================================

@router.get("")
async def get_cart(
    db: Session = Depends(get_db),
    me=Depends(require_login),
):
    cart = cart_service.get_cart(db, me)
    return cart.to_dict()


# ==========================================
# ➕ Add / ✏️ Update / ➖ Delete
# ==========================================

@router.post("", status_code=status.HTTP_201_CREATED)
async def add_product(
    body: AddProductRequest,
    db: Session = Depends(get_db),
    me=Depends(require_login),
):
    cart = cart_service.add_product(db, me, body.productId, body.quantity)
    db.commit()
    return cart.to_dict()


@router.put("")
async def update_product(
    body: UpdateProductRequest,
    db: Session = Depends(get_db),
    me=Depends(require_login),
):
    cart = cart_service.update_product(db, me, body.productId, body.quantity)
    db.commit()
    return cart.to_dict()


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(
    product_id: int,
    db: Session = Depends(get_db),
    me=Depends(require_login),
):
    cart_service.delete_product(db, me, product_id)
    db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ==========================================
# ✅ Checkout
# ==========================================

@router.put("/checkout", status_code=status.HTTP_204_NO_CONTENT)
async def checkout(
    db: Session = Depends(get_db),
    me=Depends(require_login),
):
    checkout_service.checkout(db, me)
    db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
