import logging
import time
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import List, Optional

import httpx
from fastapi import APIRouter, Depends, FastAPI, Query, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.concurrency import run_in_threadpool

from travel_database.db import Database
from travel_database.init_db import init_db

from .auth import get_current_user, is_protected_path
from .config import Settings, configure_logging, load_settings
from .credentials import CredentialStore, UserIdentity
from .errors import (
    InfrastructureFault,
    NotFound,
    ServiceUnavailable,
    TravelNotesError,
    Unauthorized,
    ValidationError,
)
from .schemas import (
    AuthOut,
    CompletedUpdate,
    Credentials,
    NoteFields,
    NoteOut,
    PackingItemFields,
    PackingItemOut,
    ProfileOut,
    WeatherOut,
)
from .stores import NoteStore, PackingListStore
from .travel_info import TravelInfoClient, make_http_client

logger = logging.getLogger("travel_notes.api")


# PUBLIC_INTERFACE
@dataclass
class ServerContext:
    """Everything a request handler needs, built once per app instance."""

    settings: Settings
    database: Database
    credentials: CredentialStore
    notes: NoteStore
    packing_list: PackingListStore
    travel_info: TravelInfoClient

    @classmethod
    def build(
        cls,
        settings: Settings,
        database: Optional[Database] = None,
        http_client: Optional[httpx.Client] = None,
    ) -> "ServerContext":
        database = database or Database.from_url(settings.database_url)
        return cls(
            settings=settings,
            database=database,
            credentials=CredentialStore(database),
            notes=NoteStore(database),
            packing_list=PackingListStore(database),
            travel_info=TravelInfoClient(
                http_client or make_http_client(settings.http_timeout),
                map_url=settings.map_url,
                markers_url=settings.markers_url,
                weather_url=settings.weather_url,
            ),
        )


def get_context(request: Request) -> ServerContext:
    return request.app.state.context


def _validation_messages(exc: RequestValidationError) -> List[str]:
    messages = []
    for error in exc.errors():
        msg = str(error.get("msg"))
        if error.get("type") == "json_invalid":
            # loc holds a character offset here, not a field name.
            messages.append(msg)
            continue
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        messages.append(f"{location}: {msg}" if location else msg)
    return messages


#####################
# AUTH ENDPOINTS
#####################

auth_router = APIRouter(tags=["Authentication"])


# PUBLIC_INTERFACE
@auth_router.post("/register", response_model=AuthOut, status_code=201, summary="Register a new user")
def register(payload: Credentials, ctx: ServerContext = Depends(get_context)):
    """
    Register a new user.
    Returns the username, access token and user id.
    """
    user = ctx.credentials.register(payload.username, payload.password)
    return AuthOut(username=user.username, access_token=user.access_token, user_id=user.user_id)


# PUBLIC_INTERFACE
@auth_router.post("/login", response_model=AuthOut, summary="Log in and get the access token")
def login(payload: Credentials, ctx: ServerContext = Depends(get_context)):
    """
    User login.
    Returns the same access token that was issued at registration.
    """
    user = ctx.credentials.login(payload.username, payload.password)
    return AuthOut(username=user.username, access_token=user.access_token, user_id=user.user_id)


me_router = APIRouter(tags=["Authentication"], dependencies=[Depends(get_current_user)])


# PUBLIC_INTERFACE
@me_router.get("/me", response_model=ProfileOut, summary="Get current user profile")
def get_profile(ctx: ServerContext = Depends(get_context), current_user: UserIdentity = Depends(get_current_user)):
    """Reads the profile back from the credential store."""
    user = ctx.credentials.get_user(current_user.user_id)
    if user is None:
        raise Unauthorized()
    return ProfileOut(username=user.username, user_id=user.user_id)


#####################
# TRAVEL INFO ENDPOINTS
#####################

travel_info_router = APIRouter(tags=["Travel info"])


# PUBLIC_INTERFACE
@travel_info_router.get("/map", summary="Shared trip map")
def get_map(ctx: ServerContext = Depends(get_context)):
    """Proxies the cartes.io map document."""
    return ctx.travel_info.fetch_map()


# PUBLIC_INTERFACE
@travel_info_router.get("/markers", summary="Markers on the shared trip map")
def get_markers(ctx: ServerContext = Depends(get_context)):
    return ctx.travel_info.fetch_markers()


# PUBLIC_INTERFACE
@travel_info_router.get("/home", response_model=WeatherOut, summary="Current weather for a city")
def get_weather(city: str = Query(..., min_length=1), ctx: ServerContext = Depends(get_context)):
    description = ctx.travel_info.weather_description(city)
    return WeatherOut(response=f"The weather in {city} is {description}")


#####################
# NOTES ENDPOINTS
#####################

notes_router = APIRouter(prefix="/notes", tags=["Notes"], dependencies=[Depends(get_current_user)])


# PUBLIC_INTERFACE
@notes_router.get("", response_model=List[NoteOut], summary="List the user's notes")
def list_notes(ctx: ServerContext = Depends(get_context), current_user: UserIdentity = Depends(get_current_user)):
    """Newest first."""
    return ctx.notes.list(current_user.user_id)


# PUBLIC_INTERFACE
@notes_router.post("", response_model=NoteOut, summary="Create a note")
def create_note(
    payload: NoteFields,
    ctx: ServerContext = Depends(get_context),
    current_user: UserIdentity = Depends(get_current_user),
):
    """
    Create a note owned by the authenticated user.
    Any owner supplied in the body is ignored.
    """
    return ctx.notes.create(current_user.user_id, payload.model_dump(exclude_unset=True))


# PUBLIC_INTERFACE
@notes_router.patch("/{note_id}", response_model=NoteOut, summary="Update a note")
def update_note(
    note_id: int,
    payload: NoteFields,
    ctx: ServerContext = Depends(get_context),
    current_user: UserIdentity = Depends(get_current_user),
):
    """Only the supplied fields are changed."""
    note = ctx.notes.update_owned(current_user.user_id, note_id, payload.model_dump(exclude_unset=True))
    if note is None:
        raise NotFound()
    return note


# PUBLIC_INTERFACE
@notes_router.delete("/{note_id}", response_model=NoteOut, summary="Delete a note")
def delete_note(
    note_id: int,
    ctx: ServerContext = Depends(get_context),
    current_user: UserIdentity = Depends(get_current_user),
):
    """Returns the deleted note."""
    note = ctx.notes.delete_owned(current_user.user_id, note_id)
    if note is None:
        raise NotFound()
    return note


#####################
# PACKING LIST ENDPOINTS
#####################

packing_router = APIRouter(prefix="/packinglist", tags=["Packing list"], dependencies=[Depends(get_current_user)])


# PUBLIC_INTERFACE
@packing_router.get("", response_model=List[PackingItemOut], summary="List the user's packing list")
def list_packing_items(
    ctx: ServerContext = Depends(get_context),
    current_user: UserIdentity = Depends(get_current_user),
):
    return ctx.packing_list.list(current_user.user_id)


# PUBLIC_INTERFACE
@packing_router.post("", response_model=PackingItemOut, summary="Add a packing list item")
def create_packing_item(
    payload: PackingItemFields,
    ctx: ServerContext = Depends(get_context),
    current_user: UserIdentity = Depends(get_current_user),
):
    return ctx.packing_list.create(current_user.user_id, payload.model_dump(exclude_unset=True))


# PUBLIC_INTERFACE
@packing_router.patch("/{item_id}", response_model=PackingItemOut, summary="Update a packing list item")
def update_packing_item(
    item_id: int,
    payload: PackingItemFields,
    ctx: ServerContext = Depends(get_context),
    current_user: UserIdentity = Depends(get_current_user),
):
    item = ctx.packing_list.update_owned(current_user.user_id, item_id, payload.model_dump(exclude_unset=True))
    if item is None:
        raise NotFound()
    return item


# PUBLIC_INTERFACE
@packing_router.patch("/{item_id}/completed", response_model=PackingItemOut, summary="Tick or untick an item")
def set_packing_item_completed(
    item_id: int,
    payload: CompletedUpdate,
    ctx: ServerContext = Depends(get_context),
    current_user: UserIdentity = Depends(get_current_user),
):
    item = ctx.packing_list.set_completed(current_user.user_id, item_id, payload.is_completed)
    if item is None:
        raise NotFound()
    return item


# PUBLIC_INTERFACE
@packing_router.delete("/{item_id}", response_model=PackingItemOut, summary="Delete a packing list item")
def delete_packing_item(
    item_id: int,
    ctx: ServerContext = Depends(get_context),
    current_user: UserIdentity = Depends(get_current_user),
):
    item = ctx.packing_list.delete_owned(current_user.user_id, item_id)
    if item is None:
        raise NotFound()
    return item


#####################
# APP FACTORY
#####################


@asynccontextmanager
async def lifespan(app: FastAPI):
    ctx: ServerContext = app.state.context
    try:
        await run_in_threadpool(init_db, ctx.database.engine)
        logger.info("Database schema ready")
    except SQLAlchemyError as exc:
        # Requests get 503 from the readiness gate until the store is reachable.
        logger.error("Database initialization failed: %s", exc)
    yield
    ctx.travel_info.close()
    ctx.database.dispose()
    logger.info("Travel notes API shut down")


# PUBLIC_INTERFACE
def create_app(
    settings: Optional[Settings] = None,
    database: Optional[Database] = None,
    http_client: Optional[httpx.Client] = None,
) -> FastAPI:
    """
    Builds the FastAPI application around an explicit ServerContext.

    Tests pass their own Database and httpx client; production builds them
    from settings.
    """
    settings = settings or load_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Travel Notes Backend API",
        description="User registration, travel notes and packing lists.",
        version="1.0.0",
        lifespan=lifespan,
        openapi_tags=[
            {"name": "Authentication", "description": "User registration and login"},
            {"name": "Notes", "description": "Create, list, update and delete travel notes"},
            {"name": "Packing list", "description": "Manage packing list items"},
            {"name": "Travel info", "description": "Trip map, markers and weather"},
        ],
    )
    app.state.context = ServerContext.build(settings, database, http_client)

    # Middleware registered last runs first: CORS -> request log -> readiness gate.
    @app.middleware("http")
    async def readiness_gate(request: Request, call_next):
        ctx: ServerContext = request.app.state.context
        if not await run_in_threadpool(ctx.database.is_ready):
            logger.warning("Rejected %s %s: database unavailable", request.method, request.url.path)
            error = ServiceUnavailable()
            return JSONResponse(status_code=error.status_code, content=error.to_payload())
        return await call_next(request)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        ms = (time.perf_counter() - start) * 1000
        logger.info("%s %s %d %.1fms", request.method, request.url.path, response.status_code, ms)
        return response

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_origins != ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(TravelNotesError)
    async def handle_travel_notes_error(request: Request, exc: TravelNotesError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_payload())

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        if is_protected_path(request.url.path):
            # Callers without a valid token get 401 whatever the body looks like.
            try:
                await run_in_threadpool(get_current_user, request)
            except Unauthorized as denied:
                return JSONResponse(status_code=denied.status_code, content=denied.to_payload())
        error = ValidationError(details={"errors": _validation_messages(exc)})
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=error.to_payload())

    @app.exception_handler(SQLAlchemyError)
    async def handle_database_error(request: Request, exc: SQLAlchemyError):
        logger.error("Database error on %s %s: %s", request.method, request.url.path, exc)
        error = InfrastructureFault()
        return JSONResponse(status_code=error.status_code, content=error.to_payload())

    # Root Health Check
    @app.get("/", summary="Health Check", tags=["General"])
    def health_check():
        """Simple health check endpoint."""
        return {"message": "Healthy"}

    app.include_router(auth_router)
    app.include_router(me_router)
    app.include_router(notes_router)
    app.include_router(packing_router)
    app.include_router(travel_info_router)
    return app


app = create_app()
