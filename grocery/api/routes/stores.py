from fastapi import APIRouter, Depends, HTTPException

from grocery.api.routes.grocery import get_service, run_mutation
from grocery.logic.shopping.list_service import GroceryListService
from grocery.utilities.validators import StoreInput, StoreUpdateInput

router = APIRouter(prefix="/api/stores", tags=["Stores"])


@router.get("")
def list_stores(service: GroceryListService = Depends(get_service)):
    return [s.to_dict() for s in run_mutation("load stores", service.stores)]


@router.post("", status_code=201)
def add_store(body: StoreInput, service: GroceryListService = Depends(get_service)):
    return run_mutation("add store", service.add_store, body.name, body.color).to_dict()


@router.post("/seed")
def seed_stores(service: GroceryListService = Depends(get_service)):
    created = run_mutation("seed stores", service.seed_default_stores)
    return {"seeded": bool(created), "count": len(created), "stores": [s.to_dict() for s in created]}


@router.patch("/{store_id}")
def update_store(store_id: str, body: StoreUpdateInput, service: GroceryListService = Depends(get_service)):
    changes = body.model_dump(exclude_unset=True)
    if not changes:
        raise HTTPException(status_code=400, detail="Nothing to update")
    store = None
    if "name" in changes:
        store = run_mutation("rename store", service.rename_store, store_id, changes["name"])
    if "color" in changes:
        store = run_mutation("update store", service.recolor_store, store_id, changes["color"])
    return store.to_dict()


@router.delete("/{store_id}")
def delete_store(store_id: str, service: GroceryListService = Depends(get_service)):
    store = run_mutation("delete store", service.delete_store, store_id)
    return {"status": "deleted", "store": store.to_dict()}
