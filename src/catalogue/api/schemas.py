"""Pydantic request/response schemas for the Catalogue API."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

# --- Product Request Schemas ---


class CreateProductRequest(BaseModel):
    """Required-field checks happen in the domain, so every field is optional here."""

    model_config = {
        "populate_by_name": True,
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Ao Dai Silk Scarf",
                    "price": 25.0,
                    "categories": ["cat-accessories"],
                    "description": "Hand-painted silk scarf.",
                    "discount": 5,
                    "quantity": 40,
                    "uploaded_files": ["scarf-front.jpg"],
                    "image_links": ["https://cdn.example.com/scarf-back.jpg"],
                }
            ]
        }
    }

    name: str | None = Field(None, max_length=255)
    price: float | None = None
    categories: list[str] | None = None
    description: str | None = None
    discount: float | None = None
    quantity: int | None = None
    uploaded_files: list[str] = Field(default_factory=list, alias="uploadedFiles")
    image_links: list[str] | str | None = Field(None, alias="imageLinks")


class UpdateProductRequest(BaseModel):
    model_config = {
        "populate_by_name": True,
        "json_schema_extra": {
            "examples": [
                {
                    "price": 22.5,
                    "quantity": 60,
                    "image_links": ["https://cdn.example.com/scarf-detail.jpg"],
                }
            ]
        }
    }

    name: str | None = Field(None, max_length=255)
    description: str | None = None
    price: float | None = None
    discount: float | None = None
    quantity: int | None = None
    categories: list[str] | None = None
    uploaded_files: list[str] = Field(default_factory=list, alias="uploadedFiles")
    image_links: list[str] | str | None = Field(None, alias="imageLinks")


# --- Event Request Schemas ---


class CreateEventRequest(BaseModel):
    model_config = {
        "populate_by_name": True,
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Tet Sale",
                    "description": "Lunar New Year promotion",
                    "start_date": "2025-01-01",
                    "end_date": "2025-01-10",
                    "location": "Online",
                    "image_links": '["https://cdn.example.com/tet-banner.jpg"]',
                }
            ]
        }
    }

    name: str | None = Field(None, max_length=255)
    description: str | None = None
    start_date: str | None = Field(None, alias="startDate")
    end_date: str | None = Field(None, alias="endDate")
    location: str | None = Field(None, max_length=255)
    uploaded_files: list[str] = Field(default_factory=list, alias="uploadedFiles")
    image_links: list[str] | str | None = Field(None, alias="imageLinks")


class UpdateEventRequest(BaseModel):
    model_config = {
        "populate_by_name": True,
        "json_schema_extra": {"examples": [{"location": "Ho Chi Minh City", "endDate": "2025-01-12"}]},
    }

    name: str | None = Field(None, max_length=255)
    description: str | None = None
    start_date: str | None = Field(None, alias="startDate")
    end_date: str | None = Field(None, alias="endDate")
    location: str | None = Field(None, max_length=255)
    uploaded_files: list[str] = Field(default_factory=list, alias="uploadedFiles")
    image_links: list[str] | str | None = Field(None, alias="imageLinks")


class AddProductsRequest(BaseModel):
    model_config = {
        "populate_by_name": True,
        "json_schema_extra": {
            "examples": [
                {
                    "product_ids": ["p1", "p2"],
                    "discount": 20,
                    "start_date": "2025-01-01",
                    "end_date": "2025-01-05",
                }
            ]
        }
    }

    product_ids: list[str] | None = Field(None, alias="productIds")
    discount: float | None = None
    start_date: str | None = Field(None, alias="startDate")
    end_date: str | None = Field(None, alias="endDate")


class RemoveProductsRequest(BaseModel):
    model_config = {"populate_by_name": True, "json_schema_extra": {"examples": [{"productIds": ["p1"]}]}}

    product_ids: list[str] | None = Field(None, alias="productIds")


# --- Response Schemas ---


class ProductResponse(BaseModel):
    id: str
    name: str
    description: str | None = None
    price: float
    discount: float = 0.0
    quantity: int = 0
    like_count: int = 0
    view_count: int = 0
    sell_count: int = 0
    categories: list[str] = Field(default_factory=list)
    images: list[str] = Field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None
    event_discount: float | None = None
    is_in_event: bool | None = None
    final_price: float | None = None


class EnrolledProductResponse(BaseModel):
    id: str
    product_id: str
    product_name: str | None = None
    product_price: float | None = None
    discount: float
    start_date: datetime
    end_date: datetime


class SaleEventResponse(BaseModel):
    id: str
    name: str
    description: str
    start_date: datetime
    end_date: datetime
    location: str | None = None
    images: list[str] = Field(default_factory=list)
    products: list[EnrolledProductResponse] = Field(default_factory=list)
    applied_product_count: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None


class EnrollmentResponse(BaseModel):
    applicable_product_id: str
    product_id: str


class DeletedCountResponse(BaseModel):
    deleted_count: int


class CounterResponse(BaseModel):
    product_id: str
    count: int


class SearchResponse(BaseModel):
    results: list[dict] = Field(default_factory=list)
    total: int = 0
    page: int = 1
    limit: int = 10


class LikeListResponse(BaseModel):
    user_id: str
    product_ids: list[str] = Field(default_factory=list)
