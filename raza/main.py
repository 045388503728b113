import logging
import sys
from contextlib import asynccontextmanager
from fastapi import FastAPI, HTTPException, Request

from raza.agents.backend import BackendAgent
from raza.agents.session_store import SessionStore
from raza.config import settings
from raza.core.errors import ApiError, ValidationFailed
from raza.core.session import AppSession
from raza.core.totals import money
from raza.schemas.api import LoginRequest, MasterRequest, SaveRequest
from raza.screens.ledger import OrderScreen, PurchaseScreen, SalesScreen
from raza.screens.master import MASTERS, MasterScreen
from raza.screens.route import RouteScreen

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stdout)
    ]
)

logger = logging.getLogger(__name__)

SCREENS = {
    "sales": SalesScreen,
    "orders": OrderScreen,
    "purchases": PurchaseScreen,
    "route-builder": RouteScreen,
}

@asynccontextmanager
async def lifespan(app: FastAPI):
    store = SessionStore()
    await store.create_tables()
    session = AppSession(store)
    await session.load()
    app.state.store = store
    app.state.session = session
    app.state.agent = BackendAgent(session)
    logger.info("Dashboard API ready, backend at %s", settings.API_BASE_URL)
    yield
    await store.dispose()

app = FastAPI(title="Raza Boiler Dashboard", lifespan=lifespan)

def _notice(screen) -> dict | None:
    return screen.notice.model_dump() if screen.notice is not None else None

async def _open(screen):
    loaded = await screen.load()
    if screen.denied:
        screen.close()
        raise HTTPException(status_code=403, detail=_notice(screen))
    if not loaded:
        screen.close()
        raise HTTPException(status_code=502, detail=_notice(screen))
    return screen

def _ledger_screen(request: Request, resource: str):
    screen_class = SCREENS.get(resource)
    if screen_class is None:
        raise HTTPException(status_code=404, detail=f"Unknown ledger {resource}")
    return screen_class(request.app.state.agent, request.app.state.session)

def _master_screen(request: Request, name: str):
    master = MASTERS.get(name)
    if master is None:
        raise HTTPException(status_code=404, detail=f"Unknown master {name}")
    return MasterScreen(request.app.state.agent, request.app.state.session, master)

@app.post("/login")
async def login(request: Request, body: LoginRequest):
    session = request.app.state.session
    try:
        user = await session.login(request.app.state.agent, body.email, body.password)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ApiError:
        raise HTTPException(status_code=401, detail="Invalid credentials. Try again.")
    return {"user": user.model_dump(), "capabilities": session.capabilities.as_dict()}

@app.post("/logout")
async def logout(request: Request):
    await request.app.state.session.logout()
    return {"message": "Logged out"}

@app.get("/me")
async def me(request: Request):
    session = request.app.state.session
    user = session.user.model_dump() if session.user is not None else None
    return {"user": user, "capabilities": session.capabilities.as_dict()}

@app.get("/ledgers/{resource}")
async def list_ledger(
    request: Request,
    resource: str,
    date: str | None = None,
    status: str = "",
    party_id: str | None = None,
    search: str = "",
):
    screen = await _open(_ledger_screen(request, resource))
    if date:
        screen.selected_date = date
    screen.status_filter = status
    screen.party_filter = party_id
    screen.search = search

    rows = []
    for header in screen.filtered():
        lines = screen.header_lines(header.id)
        rows.append({
            **header.model_dump(),
            "party_name": screen.party_name(header.party_id),
            "lines": [
                {
                    **line.model_dump(),
                    "item_name": screen.item_name(line.item_id),
                    "total": money(screen.composer.line_total(line)),
                }
                for line in lines
            ],
        })
    totals = screen.day_totals()
    screen.close()
    return {
        "date": screen.selected_date,
        "headers": rows,
        "totals": {**totals, "total_value": money(totals["total_value"])},
        "form_visible": screen.form_visible,
    }

@app.post("/ledgers/{resource}")
async def save_ledger(request: Request, resource: str, body: SaveRequest):
    screen = await _open(_ledger_screen(request, resource))
    if body.editing_id is not None and not await screen.start_edit(body.editing_id):
        screen.close()
        raise HTTPException(status_code=400, detail=_notice(screen))

    header = body.header.model_dump(exclude_unset=True)
    if resource == "route-builder" and "driver_id" in header:
        header["party_id"] = header["driver_id"]
    screen.set_header(**header)
    try:
        screen.composer.replace([line.model_dump() for line in body.lines])
    except ValidationFailed as e:
        screen.fail(e, "Invalid line items")
        screen.close()
        raise HTTPException(status_code=400, detail={"notice": _notice(screen), "errors": screen.field_errors})

    header_id = await screen.save()
    screen.close()
    if header_id is None:
        raise HTTPException(status_code=400, detail={"notice": _notice(screen), "errors": screen.field_errors})
    return {"id": header_id, "notice": _notice(screen)}

@app.delete("/ledgers/{resource}/{header_id}")
async def delete_ledger(request: Request, resource: str, header_id: str):
    screen = await _open(_ledger_screen(request, resource))
    deleted = await screen.delete(header_id)
    screen.close()
    if not deleted:
        raise HTTPException(status_code=400, detail=_notice(screen))
    return {"notice": _notice(screen)}

@app.get("/route-builder/{route_id}/stops")
async def route_stops(request: Request, route_id: str, search: str = ""):
    screen = await _open(RouteScreen(request.app.state.agent, request.app.state.session))
    await screen.select_route(route_id)
    screen.stop_search = search
    stops = screen.filtered_stops()
    totals = screen.stop_totals(filtered=bool(search))
    screen.close()
    return {
        "stops": [line.model_dump() for line in stops],
        "totals": {**totals, "total_value": money(totals["total_value"])},
    }

@app.get("/masters/{name}")
async def list_master(request: Request, name: str, search: str = ""):
    screen = await _open(_master_screen(request, name))
    screen.search = search
    rows = screen.filtered()
    screen.close()
    return {"rows": [row.model_dump() for row in rows], "form_visible": screen.form_visible}

@app.post("/masters/{name}")
async def create_master(request: Request, name: str, body: MasterRequest):
    return await _save_master(request, name, body, None)

@app.put("/masters/{name}/{entity_id}")
async def update_master(request: Request, name: str, entity_id: str, body: MasterRequest):
    return await _save_master(request, name, body, entity_id)

async def _save_master(request: Request, name: str, body: MasterRequest, entity_id):
    screen = _master_screen(request, name)
    extra = {"password": body.password} if body.password else {}
    saved = await screen.save(body.data, entity_id, **extra)
    screen.close()
    if not saved:
        raise HTTPException(status_code=400, detail={"notice": _notice(screen), "errors": screen.field_errors})
    return {"id": screen.saved_id, "notice": _notice(screen)}

@app.delete("/masters/{name}/{entity_id}")
async def delete_master(request: Request, name: str, entity_id: str):
    screen = _master_screen(request, name)
    deleted = await screen.delete(entity_id)
    screen.close()
    if not deleted:
        raise HTTPException(status_code=400, detail=_notice(screen))
    return {"notice": _notice(screen)}
