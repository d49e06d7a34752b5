# rank_overlay/routes/widget.py
import os

from fastapi import APIRouter, Request
from fastapi.responses import FileResponse, JSONResponse, RedirectResponse

from rank_overlay.services.cache import SnapshotCache

router = APIRouter(tags=["widget"])

STATIC_DIR = os.path.join(os.path.dirname(os.path.dirname(__file__)), "static")
NO_STORE = {"Cache-Control": "no-store"}
READY_WAIT_SECONDS = 2.0


def _cache(request: Request) -> SnapshotCache:
  return request.app.state.cache


@router.get("/", include_in_schema=False)
async def index():
  return RedirectResponse("/widget")


@router.get("/widget.json")
async def widget_json(request: Request):
  """
  Latest snapshot plus the status of the last refresh attempt. A failed
  refresh still returns the previous snapshot's fields with ok=false.
  """
  cache = _cache(request)
  wait = getattr(request.app.state, "ready_wait", READY_WAIT_SECONDS)
  if not cache.ready and not await cache.wait_ready(wait):
    return JSONResponse({"ok": False, "error": "not ready"}, status_code=503, headers=NO_STORE)

  state = cache.state
  body = {"ok": state.ok, "error": state.error}
  if state.snapshot is not None:
    body.update(state.snapshot.to_payload())
  body["updatedAt"] = state.updatedAt
  return JSONResponse(body, headers=NO_STORE)


@router.get("/widget", include_in_schema=False)
async def widget():
  return FileResponse(os.path.join(STATIC_DIR, "widget.html"), media_type="text/html; charset=utf-8")
