"""Grocery list endpoints: the view, typed entries, edits, moves and sweeps."""
import logging
from typing import Callable, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse

from grocery.events.web_observers import get_events as get_web_events
from grocery.infra.Grocery_Repository import NotFoundError
from grocery.logic.shopping.duplicates import PendingEntry, Resolution
from grocery.logic.shopping.list_service import GroceryListService
from grocery.logic.shopping.sections import sections_to_dict
from grocery.utilities.validators import EntryInput, ItemUpdate, MergeInput, MoveOptions, NameInput, ResolveInput

router = APIRouter(prefix="/api/grocery", tags=["Grocery"])
logger = logging.getLogger(__name__)

_service: Optional[GroceryListService] = None


def get_service() -> GroceryListService:
    """Process-wide service over the configured data file."""
    global _service
    if _service is None:
        _service = GroceryListService()
    return _service


def run_mutation(action: str, fn: Callable, *args):
    """Run a service call: unknown ids become 404, other rejected input 400, storage failures 503."""
    try:
        return fn(*args)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        logger.warning("Could not %s: %s", action, e)
        raise HTTPException(status_code=400, detail=str(e))
    except OSError:
        logger.exception("Failed to %s", action)
        raise HTTPException(status_code=503, detail=f"Could not {action}, please retry")


@router.get("")
def get_list(service: GroceryListService = Depends(get_service)):
    data = sections_to_dict(run_mutation("load the list", service.sections))
    data["recent"] = service.recent_items()
    return data


@router.post("/items")
def submit_entry(body: EntryInput, service: GroceryListService = Depends(get_service)):
    result = run_mutation("add item", service.submit_entry, body.text, body.store_id)
    status = 201 if result.status == "added" else 200
    return JSONResponse(status_code=status, content=result.to_dict())


@router.post("/items/resolve")
def resolve_duplicate(body: ResolveInput, service: GroceryListService = Depends(get_service)):
    existing = service.repository.get_item(body.existing_id)
    if existing is None:
        raise HTTPException(status_code=404, detail=f"Item '{body.existing_id}' not found.")
    pending = PendingEntry(body.name.strip(), body.quantity, body.store_id, existing)
    result = run_mutation("resolve duplicate", service.resolve_duplicate, pending, Resolution(body.resolution))
    return result.to_dict()


@router.get("/duplicates")
def check_duplicate(name: str = Query(..., min_length=1), service: GroceryListService = Depends(get_service)):
    return run_mutation("check duplicates", service.check_duplicate, name).to_dict()


@router.patch("/items/{item_id}")
def update_item(item_id: str, body: ItemUpdate, service: GroceryListService = Depends(get_service)):
    return run_mutation("update item", service.update_item, item_id, body).to_dict()


@router.delete("/items/{item_id}")
def delete_item(item_id: str, service: GroceryListService = Depends(get_service)):
    item = run_mutation("delete item", service.delete_item, item_id)
    return {"status": "deleted", "item": item.to_dict()}


@router.post("/items/{item_id}/toggle")
def toggle_checked(item_id: str, service: GroceryListService = Depends(get_service)):
    return run_mutation("toggle item", service.toggle_checked, item_id).to_dict()


@router.post("/items/{item_id}/move")
def move_item(item_id: str, body: MoveOptions, service: GroceryListService = Depends(get_service)):
    return run_mutation("move item", service.move_item, item_id, body).to_dict()


@router.post("/items/{item_id}/move-up")
def move_up(item_id: str, service: GroceryListService = Depends(get_service)):
    return run_mutation("move item", service.move_up, item_id).to_dict()


@router.post("/items/{item_id}/move-down")
def move_down(item_id: str, service: GroceryListService = Depends(get_service)):
    return run_mutation("move item", service.move_down, item_id).to_dict()


@router.post("/items/{item_id}/merge")
def merge_quantity(item_id: str, body: MergeInput, service: GroceryListService = Depends(get_service)):
    return run_mutation("merge quantity", service.merge_quantity, item_id, body.quantity).to_dict()


@router.post("/clear-checked")
def clear_checked(service: GroceryListService = Depends(get_service)):
    return {"deleted_count": run_mutation("clear checked items", service.clear_checked)}


@router.post("/remove-by-name")
def remove_by_name(body: NameInput, service: GroceryListService = Depends(get_service)):
    return {"removed_count": run_mutation("remove items", service.remove_by_name, body.name)}


@router.get("/recent")
def recent_items(service: GroceryListService = Depends(get_service)):
    return {"items": service.recent_items()}


@router.post("/recent/re-add")
def re_add(body: NameInput, service: GroceryListService = Depends(get_service)):
    result = run_mutation("re-add item", service.re_add, body.name)
    status = 201 if result.status == "added" else 200
    return JSONResponse(status_code=status, content=result.to_dict())


@router.get("/events")
def list_events(since: Optional[int] = Query(default=None, ge=0)):
    """Change hints for open lists; poll with since=<next_cursor>."""
    return get_web_events(since)
