"""REST endpoints for remembering a person's preferred display name."""

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel, Field

from gotnext.config import get_name_store_path
from gotnext.services.name_store import JsonFileNameStore, name_key

router = APIRouter(prefix="/api/names", tags=["names"])


class SetNameRequest(BaseModel):
    name: str = Field(min_length=1, max_length=40)


def _get_name_store(request: Request):
    """Get or create the name store from app state."""
    if not hasattr(request.app.state, "name_store"):
        request.app.state.name_store = JsonFileNameStore(get_name_store_path())
    return request.app.state.name_store


@router.get("/{client_id}")
async def get_name(request: Request, client_id: str):
    """Get the saved display name for a client (null if none)."""
    return {"name": _get_name_store(request).get_item(name_key(client_id))}


@router.put("/{client_id}")
async def set_name(request: Request, client_id: str, body: SetNameRequest):
    """Remember a client's display name."""
    name = body.name.strip()
    if not name:
        raise HTTPException(status_code=422, detail="Name cannot be blank")
    _get_name_store(request).set_item(name_key(client_id), name)
    return {"name": name}


@router.delete("/{client_id}")
async def forget_name(request: Request, client_id: str):
    """Forget a client's display name."""
    _get_name_store(request).remove_item(name_key(client_id))
    return {"status": "removed"}
