"""Catalog management endpoints shared by the admin and vendor surfaces.

The same handlers serve both; what a caller can see or change is decided by
the services from the caller's role and shops.
"""

from typing import Annotated, Callable

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from marketplace.api.deps import get_services
from marketplace.api.services import Services
from shared.models.attribute import AttributeListQuery, CreateAttributeRequest, UpdateAttributeRequest
from shared.models.brand import BrandListQuery, CreateBrandRequest, UpdateBrandRequest
from shared.models.category import CategoryListQuery, CreateCategoryRequest, UpdateCategoryRequest
from shared.models.common import Caller
from shared.models.coupon import CouponListQuery, CreateCouponRequest, UpdateCouponRequest
from shared.models.product import CreateProductRequest, ProductListQuery, UpdateProductRequest
from shared.models.staff import AddStaffRequest, StaffListQuery, UpdateStaffRequest
from shared.models.tag import CreateTagRequest, TagListQuery, UpdateTagRequest


class IdRequest(BaseModel):
    id: Annotated[str, Field(min_length=1)]


def page_response(page) -> dict:
    return {"success": True, **page.model_dump(mode="json")}


def entity_response(key: str, entity, message: str = None) -> dict:
    body = {"success": True, key: entity.model_dump(mode="json")}
    if message:
        body["message"] = message
    return body


def add_entity_routes(router: APIRouter, caller_dep: Callable, path: str, key: str, service_name: str,
                      list_query, create_request, update_request, toggles=("active",)) -> None:
    """Register list / get / create / update / delete / toggle routes for one entity."""
    label = key.capitalize()

    @router.get(f"/{path}")
    def list_entities(query: Annotated[list_query, Query()],
                      caller: Caller = Depends(caller_dep),
                      services: Services = Depends(get_services)):
        return page_response(getattr(services, service_name).get_page(caller, query))

    @router.get(f"/{path}/{{entity_id}}")
    def get_entity(entity_id: str,
                   caller: Caller = Depends(caller_dep),
                   services: Services = Depends(get_services)):
        return entity_response(key, getattr(services, service_name).get(caller, entity_id))

    @router.post(f"/{path}", status_code=201)
    def create_entity(body: create_request,
                      caller: Caller = Depends(caller_dep),
                      services: Services = Depends(get_services)):
        entity = getattr(services, service_name).create(caller, body)
        return entity_response(key, entity, f"{label} created successfully")

    @router.post(f"/{path}/update")
    def update_entity(body: update_request,
                      caller: Caller = Depends(caller_dep),
                      services: Services = Depends(get_services)):
        entity = getattr(services, service_name).update(caller, body)
        return entity_response(key, entity, f"{label} updated successfully")

    @router.post(f"/{path}/delete")
    def delete_entity(body: IdRequest,
                      caller: Caller = Depends(caller_dep),
                      services: Services = Depends(get_services)):
        getattr(services, service_name).delete(caller, body.id)
        return {"success": True, "message": f"{label} deleted successfully"}

    for toggle in toggles:
        _add_toggle_route(router, caller_dep, path, key, service_name, toggle)


def _add_toggle_route(router, caller_dep, path, key, service_name, toggle) -> None:
    @router.post(f"/{path}/toggle-{toggle}")
    def toggle_entity(body: IdRequest,
                      caller: Caller = Depends(caller_dep),
                      services: Services = Depends(get_services)):
        entity = getattr(getattr(services, service_name), f"toggle_{toggle}")(caller, body.id)
        return entity_response(key, entity, f"{key.capitalize()} updated successfully")


def add_staff_routes(router: APIRouter, caller_dep: Callable) -> None:

    @router.get("/staff")
    def list_staff(query: Annotated[StaffListQuery, Query()],
                   caller: Caller = Depends(caller_dep),
                   services: Services = Depends(get_services)):
        return page_response(services.staff.get_page(caller, query))

    @router.get("/staff/{staff_id}")
    def get_staff(staff_id: str,
                  caller: Caller = Depends(caller_dep),
                  services: Services = Depends(get_services)):
        return entity_response("staff", services.staff.get(caller, staff_id))

    @router.post("/staff", status_code=201)
    def add_staff(body: AddStaffRequest,
                  caller: Caller = Depends(caller_dep),
                  services: Services = Depends(get_services)):
        return entity_response("staff", services.staff.add(caller, body), "Staff member added successfully")

    @router.post("/staff/update")
    def update_staff(body: UpdateStaffRequest,
                     caller: Caller = Depends(caller_dep),
                     services: Services = Depends(get_services)):
        return entity_response("staff", services.staff.update(caller, body), "Staff member updated successfully")

    @router.post("/staff/remove")
    def remove_staff(body: IdRequest,
                     caller: Caller = Depends(caller_dep),
                     services: Services = Depends(get_services)):
        services.staff.remove(caller, body.id)
        return {"success": True, "message": "Staff member removed successfully"}


def build_catalog_router(caller_dep: Callable, prefix: str, tags: list) -> APIRouter:
    router = APIRouter(prefix=prefix, tags=tags)
    add_entity_routes(router, caller_dep, "categories", "category", "categories",
                      CategoryListQuery, CreateCategoryRequest, UpdateCategoryRequest,
                      toggles=("active", "featured"))
    add_entity_routes(router, caller_dep, "brands", "brand", "brands",
                      BrandListQuery, CreateBrandRequest, UpdateBrandRequest)
    add_entity_routes(router, caller_dep, "tags", "tag", "tags",
                      TagListQuery, CreateTagRequest, UpdateTagRequest)
    add_entity_routes(router, caller_dep, "attributes", "attribute", "attributes",
                      AttributeListQuery, CreateAttributeRequest, UpdateAttributeRequest)
    add_entity_routes(router, caller_dep, "products", "product", "products",
                      ProductListQuery, CreateProductRequest, UpdateProductRequest,
                      toggles=("active", "featured"))
    add_entity_routes(router, caller_dep, "coupons", "coupon", "coupons",
                      CouponListQuery, CreateCouponRequest, UpdateCouponRequest, toggles=())
    add_staff_routes(router, caller_dep)
    return router
