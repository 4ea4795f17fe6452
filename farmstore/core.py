from pydantic import BaseModel, Field, field_validator
from typing import Optional, Dict, Any, List

LOW_STOCK_THRESHOLD = 5


class CategoryIn(BaseModel):
    name: str = Field(..., min_length=1)
    description: Optional[str] = ""


class ProductIn(BaseModel):
    name: str = Field(..., min_length=1)
    price_cents: int = Field(..., ge=0)
    stock_quantity: int = Field(0, ge=0)
    description: Optional[str] = ""
    image_url: Optional[str] = ""
    category_id: Optional[str] = None


class AddToCartIn(BaseModel):
    session_id: str = Field(..., min_length=1)
    product_id: str
    quantity: int = 1


class UpdateCartIn(BaseModel):
    session_id: str = Field(..., min_length=1)
    cart_item_id: str
    quantity: int


class RemoveFromCartIn(BaseModel):
    session_id: str = Field(..., min_length=1)
    cart_item_id: str


class ClearCartIn(BaseModel):
    session_id: str = Field(..., min_length=1)


class CustomerIn(BaseModel):
    """Delivery details collected by the checkout form."""
    name: str
    email: str
    phone: str
    address: str

    @field_validator("name")
    @classmethod
    def _name_required(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Please enter your name")
        return v.strip()

    @field_validator("email")
    @classmethod
    def _email_valid(cls, v: str) -> str:
        if not v.strip() or "@" not in v:
            raise ValueError("Please enter a valid email address")
        return v.strip()

    @field_validator("phone")
    @classmethod
    def _phone_required(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Please enter your phone number")
        return v.strip()

    @field_validator("address")
    @classmethod
    def _address_required(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Please enter your delivery address")
        return v.strip()


class CheckoutIn(BaseModel):
    session_id: str = Field(..., min_length=1)
    # validated as CustomerIn after the empty-cart check
    customer: Dict[str, Any]


def stock_status(stock_quantity: int) -> str:
    if stock_quantity <= 0:
        return "out_of_stock"
    if stock_quantity <= LOW_STOCK_THRESHOLD:
        return "low_stock"
    return "in_stock"


def _make_product_dict(p: ProductIn) -> Dict[str, Any]:
    return {
        "name": p.name,
        "description": p.description or "",
        "price_cents": p.price_cents,
        "image_url": p.image_url or "",
        "stock_quantity": p.stock_quantity,
        "category_id": p.category_id,
    }


def product_view(product: Dict[str, Any], category: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    out = dict(product)
    out["stock_status"] = stock_status(product.get("stock_quantity", 0))
    if category is not None:
        out["category_name"] = category.get("name")
    return out


def filter_products(products: List[Dict[str, Any]], category_id: Optional[str] = None,
                    query: Optional[str] = None) -> List[Dict[str, Any]]:
    """
    Narrow a product list the way the storefront sidebar and search box do:
    category first, then a case-insensitive substring match on name or
    description. Empty filters keep everything.
    """
    filtered = products
    if category_id:
        filtered = [p for p in filtered if p.get("category_id") == category_id]
    if query:
        term = query.lower()
        filtered = [
            p for p in filtered
            if term in (p.get("name") or "").lower() or term in (p.get("description") or "").lower()
        ]
    return filtered
