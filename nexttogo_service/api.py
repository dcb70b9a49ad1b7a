# nexttogo_service/api.py

from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any
from typing import Dict
from typing import List
from typing import Optional

import structlog
from fastapi import Depends
from fastapi import FastAPI
from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from .config import get_settings
from .countdown import countdown
from .countdown import row_accessibility_label
from .engine import NextToGoEngine
from .logging_config import configure_logging
from .middleware.error_handler import UserFriendlyException
from .middleware.error_handler import user_friendly_exception_handler
from .middleware.error_handler import validation_exception_handler
from .models import DisplayableRace
from .models import Race
from .models import RaceCategory
from .state import Empty
from .state import Error
from .state import FeedState
from .state import Loaded
from .state import Loading
from .state import assert_never_state
from .user_friendly_errors import describe_feed_error

log = structlog.get_logger()


class FilterUpdate(BaseModel):
    categories: List[str]


# --- Serialisation helpers ---


def category_payload(category: RaceCategory) -> Dict[str, str]:
    return {
        "id": category.value,
        "name": category.display_name,
        "emoji": category.emoji,
        "icon": category.icon,
    }


def race_payload(race: Race) -> Dict[str, Any]:
    return race.model_dump(mode="json", by_alias=True)


def row_payload(row: DisplayableRace, now: datetime) -> Dict[str, Any]:
    if row.is_placeholder:
        return {"id": row.id, "placeholder": True}
    race = row.race
    remaining = countdown(now, race.advertised_start)
    category = race.category
    return {
        "id": row.id,
        "placeholder": False,
        "race": race_payload(race),
        "category": category_payload(category) if category else None,
        "accessibilityLabel": row_accessibility_label(race),
        "countdown": {"compact": remaining.compact, "accessibility": remaining.accessible},
    }


def state_payload(state: FeedState) -> Dict[str, Any]:
    if isinstance(state, Loaded):
        return {"state": state.kind, "races": [race_payload(r) for r in state.races]}
    if isinstance(state, Error):
        return {"state": state.kind, "error": describe_feed_error(state.reason)}
    if isinstance(state, (Loading, Empty)):
        return {"state": state.kind}
    assert_never_state(state)


def filter_payload(categories) -> List[str]:
    return sorted(c.value for c in categories)


# --- Application ---


def create_app(engine: Optional[NextToGoEngine] = None) -> FastAPI:
    settings = get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging(settings.LOG_LEVEL)
        log.info("Uvicorn is online, starting lifespan hook.")
        app.state.engine = engine or NextToGoEngine(config=settings)
        app.state.engine.start()
        yield
        log.info("Server shutdown sequence initiated.")
        await app.state.engine.aclose()
        log.info("Server shutdown sequence complete.")

    app = FastAPI(
        title="Next To Go Races API",
        version="1.0",
        lifespan=lifespan,
        docs_url="/api/docs",
        openapi_url="/api/openapi.json",
    )
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(UserFriendlyException, user_friendly_exception_handler)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "PUT"],
        allow_headers=["*"],
    )
    _register_routes(app)
    return app


def get_engine(request: Request) -> NextToGoEngine:
    return request.app.state.engine


def _register_routes(app: FastAPI):
    @app.get("/health")
    async def health_check():
        return {"status": "ok", "timestamp": datetime.now().isoformat()}

    @app.get("/api/races")
    async def get_races(engine: NextToGoEngine = Depends(get_engine)):
        frame = engine.render()
        payload = {
            "state": frame.state.kind,
            "now": frame.now.isoformat(),
            "filter": filter_payload(frame.category_filter),
            "races": [row_payload(row, frame.now) for row in frame.rows],
        }
        if isinstance(frame.state, Error):
            payload["error"] = describe_feed_error(frame.state.reason)
        return payload

    @app.get("/api/state")
    async def get_state(engine: NextToGoEngine = Depends(get_engine)):
        return state_payload(engine.state)

    @app.get("/api/categories")
    async def get_categories():
        return [category_payload(c) for c in RaceCategory]

    @app.get("/api/filter")
    async def get_filter(engine: NextToGoEngine = Depends(get_engine)):
        return {"categories": filter_payload(engine.category_filter)}

    @app.put("/api/filter")
    async def put_filter(update: FilterUpdate, engine: NextToGoEngine = Depends(get_engine)):
        try:
            engine.category_filter = update.categories
        except ValueError as e:
            raise UserFriendlyException("unknown_category", status_code=422, details=str(e))
        return {"categories": filter_payload(engine.category_filter)}

    @app.get("/api/status")
    async def get_status(engine: NextToGoEngine = Depends(get_engine)):
        return engine.get_status()


app = create_app()
