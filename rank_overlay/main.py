import logging
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI
from fastapi.responses import PlainTextResponse

from rank_overlay.config import Settings, load_settings
from rank_overlay.ddragon import IconResolver
from rank_overlay.riot_client import RiotClient
from rank_overlay.routes.widget import router as widget_router
from rank_overlay.services.cache import SnapshotCache
from rank_overlay.services.scheduler import RefreshScheduler
from rank_overlay.services.snapshot import SnapshotBuilder

log = logging.getLogger("main")
if not log.handlers:
  h = logging.StreamHandler()
  h.setFormatter(logging.Formatter("[Startup] %(message)s"))
  log.addHandler(h)
  log.setLevel(logging.INFO)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
  @asynccontextmanager
  async def lifespan(app: FastAPI):
    s = settings or load_settings()
    log.info("Player: %s (%s / %s)", s.riot_id, s.platform, s.regional)
    log.info("Queue: %s, poll every %ss, session gap %s min", s.rank_queue, s.poll_seconds, s.session_gap_minutes)

    async with RiotClient(s) as riot, httpx.AsyncClient(timeout=httpx.Timeout(10.0, connect=5.0)) as http:
      builder = SnapshotBuilder(riot, IconResolver(http), s)
      scheduler = RefreshScheduler(builder, app.state.cache, s.poll_seconds)
      await scheduler.start()
      app.state.scheduler = scheduler
      try:
        yield
      finally:
        await scheduler.stop()

  app = FastAPI(title="Rank Overlay", lifespan=lifespan)
  app.state.cache = SnapshotCache()

  #health check
  @app.get("/api/health", response_class=PlainTextResponse)
  async def health():
    return "ok"

  app.include_router(widget_router)
  return app


app = create_app()


def run():
  import uvicorn

  s = load_settings()
  log.info("OK: http://127.0.0.1:%d/widget", s.port)
  log.info("JSON: http://127.0.0.1:%d/widget.json", s.port)
  uvicorn.run(create_app(s), host="0.0.0.0", port=s.port)
