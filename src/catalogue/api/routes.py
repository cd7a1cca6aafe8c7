"""FastAPI endpoints for the Catalogue domain.

Thin adapters that translate HTTP requests into domain commands and read
aggregates back for the response envelope.
"""

import json

from fastapi import APIRouter, Depends, Query
from protean.utils.globals import current_domain

from catalogue.api.schemas import (
    AddProductsRequest,
    CounterResponse,
    CreateEventRequest,
    CreateProductRequest,
    DeletedCountResponse,
    EnrolledProductResponse,
    EnrollmentResponse,
    LikeListResponse,
    ProductResponse,
    RemoveProductsRequest,
    SaleEventResponse,
    SearchResponse,
    UpdateEventRequest,
    UpdateProductRequest,
)
from catalogue.likes.like_list import LikeList
from catalogue.likes.liking import LikeProduct, UnlikeProduct
from catalogue.product.counters import IncrementSell, IncrementView, process_with_retry
from catalogue.product.creation import CreateProduct
from catalogue.product.details import UpdateProductDetails
from catalogue.product.product import Product
from catalogue.product.removal import DeleteProduct
from catalogue.promotion.applicable_product import ApplicableProduct
from catalogue.promotion.enrollment import (
    AddProductsToEvent,
    RemoveApplicableProduct,
    RemoveProductsFromEvent,
    RemoveTimeSlot,
)
from catalogue.promotion.management import CreateSaleEvent, DeleteSaleEvent, UpdateSaleEvent
from catalogue.promotion.pricing import final_price, resolve_discount
from catalogue.promotion.sale_event import SaleEvent
from catalogue.search.products import products_in_category, search_products
from shared.dates import parse_instant
from shared.http import Envelope, ok, require_user_id

product_router = APIRouter(prefix="/products", tags=["products"])
event_router = APIRouter(prefix="/events", tags=["events"])
like_router = APIRouter(prefix="/like-lists", tags=["likes"])


def _json_list(values) -> str | None:
    return json.dumps(list(values)) if values else None


def _json_links(links) -> str | None:
    if links is None:
        return None
    return json.dumps(links) if isinstance(links, list) else links


def _product_response(product: Product, at=None, with_discount: bool = False) -> ProductResponse:
    response = ProductResponse(
        id=str(product.id),
        name=product.name,
        description=product.description,
        price=product.price,
        discount=product.discount or 0.0,
        quantity=product.quantity or 0,
        like_count=product.like_count or 0,
        view_count=product.view_count or 0,
        sell_count=product.sell_count or 0,
        categories=product.category_ids,
        images=product.image_urls,
        created_at=product.created_at,
        updated_at=product.updated_at,
    )
    if with_discount:
        resolution = resolve_discount(product.id, at=at)
        response.event_discount = resolution.event_discount
        response.is_in_event = resolution.is_in_event
        response.final_price = final_price(product.price, product.discount, resolution)
    return response


def _sale_event_response(sale_event: SaleEvent) -> SaleEventResponse:
    """Resolve the manifest to enrollment details, keeping manifest order."""
    rows = {str(row.id): row for row in current_domain.repository_for(ApplicableProduct).for_event(sale_event.id)}
    product_repo = current_domain.repository_for(Product)

    enrolled = []
    for ap_id in sale_event.applicable_product_ids:
        row = rows.get(ap_id)
        if row is None:
            continue
        products = product_repo._dao.query.filter(id=str(row.product_id)).all().items
        product = products[0] if products else None
        enrolled.append(
            EnrolledProductResponse(
                id=str(row.id),
                product_id=str(row.product_id),
                product_name=product.name if product else None,
                product_price=product.price if product else None,
                discount=row.discount,
                start_date=row.start_date,
                end_date=row.end_date,
            )
        )

    return SaleEventResponse(
        id=str(sale_event.id),
        name=sale_event.name,
        description=sale_event.description,
        start_date=sale_event.start_date,
        end_date=sale_event.end_date,
        location=sale_event.location,
        images=sale_event.image_urls,
        products=enrolled,
        applied_product_count=len(rows),
        created_at=sale_event.created_at,
        updated_at=sale_event.updated_at,
    )


def _load_event(event_id: str) -> SaleEventResponse:
    return _sale_event_response(current_domain.repository_for(SaleEvent).get(event_id))


# --- Product endpoints ---


@product_router.post("", status_code=201, response_model=Envelope[ProductResponse])
async def create_product(body: CreateProductRequest):
    command = CreateProduct(
        name=body.name,
        price=body.price,
        categories=_json_list(body.categories),
        description=body.description,
        discount=body.discount,
        quantity=body.quantity,
        uploaded_files=_json_list(body.uploaded_files),
        image_links=_json_links(body.image_links),
    )
    product_id = current_domain.process(command, asynchronous=False)
    product = current_domain.repository_for(Product).get(product_id)
    return ok(_product_response(product), "Product created")


@product_router.get("", response_model=Envelope[list[ProductResponse]])
async def list_products():
    products = current_domain.repository_for(Product)._dao.query.all().items
    return ok([_product_response(product) for product in products], "Products fetched")


@product_router.get("/search", response_model=Envelope[SearchResponse])
async def search(
    q: str | None = Query(None),
    page: int | None = Query(None),
    limit: int | None = Query(None),
):
    result = search_products(q, page=page, limit=limit)
    return ok(
        SearchResponse(results=result.results, total=result.total, page=result.page, limit=result.limit),
        "Search completed",
    )


@product_router.get("/category/{category_id}", response_model=Envelope[list[ProductResponse]])
async def list_by_category(category_id: str):
    products = products_in_category(category_id)
    return ok([_product_response(product) for product in products], "Products fetched")


@product_router.get("/{product_id}", response_model=Envelope[ProductResponse])
async def get_product(product_id: str, at: str | None = Query(None)):
    """Product with its discount resolved at ``at`` (default: now)."""
    product = current_domain.repository_for(Product).get(product_id)
    instant = parse_instant(at, "at") if at else None
    return ok(_product_response(product, at=instant, with_discount=True), "Product fetched")


@product_router.put("/{product_id}", response_model=Envelope[ProductResponse])
async def update_product(product_id: str, body: UpdateProductRequest):
    command = UpdateProductDetails(
        product_id=product_id,
        name=body.name,
        description=body.description,
        price=body.price,
        discount=body.discount,
        quantity=body.quantity,
        categories=json.dumps(body.categories) if body.categories is not None else None,
        uploaded_files=_json_list(body.uploaded_files),
        image_links=_json_links(body.image_links),
    )
    current_domain.process(command, asynchronous=False)
    product = current_domain.repository_for(Product).get(product_id)
    return ok(_product_response(product), "Product updated")


@product_router.delete("/{product_id}", response_model=Envelope[dict])
async def delete_product(product_id: str):
    current_domain.process(DeleteProduct(product_id=product_id), asynchronous=False)
    return ok(None, "Product deleted")


@product_router.post("/{product_id}/like", response_model=Envelope[CounterResponse])
async def like_product(product_id: str, user_id: str = Depends(require_user_id)):
    count = process_with_retry(LikeProduct(product_id=product_id, user_id=user_id))
    return ok(CounterResponse(product_id=product_id, count=count), "Product liked")


@product_router.post("/{product_id}/view", response_model=Envelope[CounterResponse])
async def view_product(product_id: str):
    count = process_with_retry(IncrementView(product_id=product_id))
    return ok(CounterResponse(product_id=product_id, count=count), "View recorded")


@product_router.post("/{product_id}/sell", response_model=Envelope[CounterResponse])
async def sell_product(product_id: str):
    count = process_with_retry(IncrementSell(product_id=product_id))
    return ok(CounterResponse(product_id=product_id, count=count), "Sale recorded")


# --- Event endpoints ---


@event_router.post("", status_code=201, response_model=Envelope[SaleEventResponse])
async def create_event(body: CreateEventRequest):
    command = CreateSaleEvent(
        name=body.name,
        description=body.description,
        start_date=body.start_date,
        end_date=body.end_date,
        location=body.location,
        uploaded_files=_json_list(body.uploaded_files),
        image_links=_json_links(body.image_links),
    )
    event_id = current_domain.process(command, asynchronous=False)
    return ok(_load_event(event_id), "Event created")


@event_router.get("", response_model=Envelope[list[SaleEventResponse]])
async def list_events():
    sale_events = current_domain.repository_for(SaleEvent)._dao.query.all().items
    return ok([_sale_event_response(sale_event) for sale_event in sale_events], "Events fetched")


@event_router.get("/{event_id}", response_model=Envelope[SaleEventResponse])
async def get_event(event_id: str):
    return ok(_load_event(event_id), "Event fetched")


@event_router.put("/{event_id}", response_model=Envelope[SaleEventResponse])
async def update_event(event_id: str, body: UpdateEventRequest):
    command = UpdateSaleEvent(
        event_id=event_id,
        name=body.name,
        description=body.description,
        start_date=body.start_date,
        end_date=body.end_date,
        location=body.location,
        uploaded_files=_json_list(body.uploaded_files),
        image_links=_json_links(body.image_links),
    )
    current_domain.process(command, asynchronous=False)
    return ok(_load_event(event_id), "Event updated")


@event_router.delete("/{event_id}", response_model=Envelope[DeletedCountResponse])
async def delete_event(event_id: str):
    removed = current_domain.process(DeleteSaleEvent(event_id=event_id), asynchronous=False)
    return ok(DeletedCountResponse(deleted_count=removed), "Event deleted")


@event_router.post("/{event_id}/products", status_code=201, response_model=Envelope[list[EnrollmentResponse]])
async def add_products(event_id: str, body: AddProductsRequest):
    command = AddProductsToEvent(
        event_id=event_id,
        product_ids=json.dumps(body.product_ids) if body.product_ids is not None else None,
        discount=body.discount,
        start_date=body.start_date,
        end_date=body.end_date,
    )
    created = current_domain.process(command, asynchronous=False)
    return ok([EnrollmentResponse(**item) for item in created], "Products added to event")


@event_router.post("/{event_id}/products/remove", response_model=Envelope[SaleEventResponse])
async def remove_products(event_id: str, body: RemoveProductsRequest):
    command = RemoveProductsFromEvent(
        event_id=event_id,
        product_ids=json.dumps(body.product_ids) if body.product_ids is not None else None,
    )
    current_domain.process(command, asynchronous=False)
    return ok(_load_event(event_id), "Products removed from event")


@event_router.delete("/{event_id}/minievents/{applicable_product_id}", response_model=Envelope[SaleEventResponse])
async def remove_applicable_product(event_id: str, applicable_product_id: str):
    command = RemoveApplicableProduct(event_id=event_id, applicable_product_id=applicable_product_id)
    current_domain.process(command, asynchronous=False)
    return ok(_load_event(event_id), "Product removed from event")


@event_router.delete("/{event_id}/timeslot", response_model=Envelope[DeletedCountResponse])
async def remove_time_slot(event_id: str, start: str | None = Query(None), end: str | None = Query(None)):
    deleted = current_domain.process(RemoveTimeSlot(event_id=event_id, start=start, end=end), asynchronous=False)
    return ok(DeletedCountResponse(deleted_count=deleted), "Time slot removed")


# --- Like list endpoints ---


@like_router.get("", response_model=Envelope[LikeListResponse])
async def get_like_list(user_id: str = Depends(require_user_id)):
    like_list = current_domain.repository_for(LikeList).for_user(user_id)
    product_ids = like_list.product_ids if like_list else []
    return ok(LikeListResponse(user_id=user_id, product_ids=product_ids), "Like list fetched")


@like_router.delete("/{product_id}", response_model=Envelope[CounterResponse])
async def unlike_product(product_id: str, user_id: str = Depends(require_user_id)):
    count = process_with_retry(UnlikeProduct(product_id=product_id, user_id=user_id))
    return ok(CounterResponse(product_id=product_id, count=count), "Product removed from like list")
