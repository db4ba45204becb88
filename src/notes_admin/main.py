import logging
import os
from typing import List, Optional

from fastapi import Depends, FastAPI, Path, Query, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlalchemy.orm import Session

from notes_admin import notes as note_ops
from notes_admin import sync
from notes_admin.database import check_connection, engine, get_db
from notes_admin.errors import NotesAdminError, NotFound
from notes_admin.models import Base
from notes_admin.queries import list_notes
from notes_admin.schemas import (
    CategoryRequest,
    CategoryResponse,
    IndexQuery,
    IndexResponse,
    NoteCreateRequest,
    NoteResponse,
    NoteUpdateRequest,
    StatisticsResponse,
    UserCreateRequest,
    UserResponse,
    UserUpdateRequest,
)
from notes_admin.statistics import Mutation, after_mutation, current_user_statistics
from notes_admin.store import DocumentStore

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Notes Admin API",
    description="Administration backend for notes, their authors and categories, with per-user note statistics.",
    version="1.0.0",
    openapi_tags=[
        {"name": "Health", "description": "Service health and status."},
        {"name": "Index", "description": "Filtered note listing with statistics."},
        {"name": "Users", "description": "Manage note authors."},
        {"name": "Categories", "description": "Manage note categories."},
        {"name": "Notes", "description": "CRUD operations for notes."},
        {"name": "Statistics", "description": "Stored per-user note counts."},
    ],
)

# CORS setup - allow frontend
frontend_origin = os.getenv("FRONTEND_ORIGIN", "http://localhost:3000")
app.add_middleware(
    CORSMiddleware,
    allow_origins=[frontend_origin],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(NotesAdminError)
async def handle_notes_admin_error(request: Request, exc: NotesAdminError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


def get_store(db: Session = Depends(get_db)) -> DocumentStore:
    """Dependency wrapping the request's session in a DocumentStore."""
    return DocumentStore(db)


def _require(store: DocumentStore, collection: str, record_id: int):
    record = store.find_by_id(collection, record_id)
    if record is None:
        raise NotFound(collection, record_id)
    return record


# PUBLIC_INTERFACE
@app.get("/health", tags=["Health"], summary="Health Check")
def health_check():
    """
    Health check endpoint.

    Returns:
        JSON object indicating service status.
    """
    return {"message": "Healthy"}


# -------- Index --------

def index_query(
    user_id: Optional[str] = Query(None, description="Only notes owned by this user"),
    category_id: Optional[str] = Query(None, description="Only notes in this category"),
    sort_by: Optional[str] = Query(None, description="Sort by user or category name (user | category)"),
) -> IndexQuery:
    """Parse the index filters, treating empty values as absent."""
    try:
        return IndexQuery(user_id=user_id, category_id=category_id, sort_by=sort_by)
    except ValidationError as exc:
        raise RequestValidationError(
            [{**error, "loc": ("query", *error["loc"])} for error in exc.errors(include_url=False)]
        ) from exc


# PUBLIC_INTERFACE
@app.get(
    "/",
    response_model=IndexResponse,
    tags=["Index"],
    summary="List notes with filters, statistics and lookups",
)
def index(
    query: IndexQuery = Depends(index_query),
    store: DocumentStore = Depends(get_store),
):
    """
    Main listing.

    Query params:
        user_id: optional owner filter
        category_id: optional category filter (combined with user_id when both given)
        sort_by: "user" or "category"

    Empty values are treated as absent, as an HTML filter form sends them.

    Returns:
        IndexResponse with the matching notes, note counts computed on the
        fly for every user, and all categories and users.
    """
    return IndexResponse(
        notes=[NoteResponse.model_validate(n) for n in list_notes(store, query.user_id, query.category_id, query.sort_by)],
        statistics=StatisticsResponse(user_statistics=current_user_statistics(store)),
        categories=[CategoryResponse.model_validate(c) for c in store.find("categories")],
        users=[UserResponse.model_validate(u) for u in store.find("users")],
        user_id=query.user_id,
        category_id=query.category_id,
        sort_by=query.sort_by,
    )


# PUBLIC_INTERFACE
@app.get(
    "/statistics",
    response_model=StatisticsResponse,
    tags=["Statistics"],
    summary="Stored per-user note counts",
)
def get_statistics(store: DocumentStore = Depends(get_store)):
    """
    Return the summary as of the last recomputation, or an empty list when
    it has never been computed.
    """
    summary = store.get_summary()
    if summary is None:
        return StatisticsResponse()
    return StatisticsResponse(user_statistics=summary.user_statistics)


# -------- Users Routes --------

# PUBLIC_INTERFACE
@app.get("/users", response_model=List[UserResponse], tags=["Users"], summary="List users")
def list_users(store: DocumentStore = Depends(get_store)):
    return store.find("users")


# PUBLIC_INTERFACE
@app.post(
    "/users",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["Users"],
    summary="Create a user",
)
def create_user(payload: UserCreateRequest, store: DocumentStore = Depends(get_store)):
    user = store.create("users", {"name": payload.name, "email": payload.email})
    after_mutation(store, Mutation.USER_CREATED)
    return user


# PUBLIC_INTERFACE
@app.get("/users/{user_id}", response_model=UserResponse, tags=["Users"], summary="Get a user by ID")
def get_user(user_id: int = Path(..., ge=1), store: DocumentStore = Depends(get_store)):
    return _require(store, "users", user_id)


# PUBLIC_INTERFACE
@app.put("/users/{user_id}", response_model=UserResponse, tags=["Users"], summary="Rename a user")
def update_user(
    payload: UserUpdateRequest,
    user_id: int = Path(..., ge=1),
    store: DocumentStore = Depends(get_store),
):
    """
    Update a user's name and email, copy the new name onto their notes and
    recompute statistics.

    Raises:
        404 if the user does not exist.
    """
    user = sync.rename_user(store, user_id, payload.name, payload.email)
    if user is None:
        raise NotFound("users", user_id)
    after_mutation(store, Mutation.USER_UPDATED)
    return user


# PUBLIC_INTERFACE
@app.delete(
    "/users/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    tags=["Users"],
    summary="Delete a user and their notes",
)
def delete_user(user_id: int = Path(..., ge=1), store: DocumentStore = Depends(get_store)):
    """
    Delete every note owned by the user, then the user, then recompute
    statistics.

    Raises:
        404 if the user does not exist.
    """
    _require(store, "users", user_id)
    sync.delete_user(store, user_id)
    after_mutation(store, Mutation.USER_DELETED)
    return None


# -------- Categories Routes --------

# PUBLIC_INTERFACE
@app.get("/categories", response_model=List[CategoryResponse], tags=["Categories"], summary="List categories")
def list_categories(store: DocumentStore = Depends(get_store)):
    return store.find("categories")


# PUBLIC_INTERFACE
@app.post(
    "/categories",
    response_model=CategoryResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["Categories"],
    summary="Create a category",
)
def create_category(payload: CategoryRequest, store: DocumentStore = Depends(get_store)):
    category = store.create("categories", {"name": payload.name})
    after_mutation(store, Mutation.CATEGORY_CREATED)
    return category


# PUBLIC_INTERFACE
@app.get(
    "/categories/{category_id}",
    response_model=CategoryResponse,
    tags=["Categories"],
    summary="Get a category by ID",
)
def get_category(category_id: int = Path(..., ge=1), store: DocumentStore = Depends(get_store)):
    return _require(store, "categories", category_id)


# PUBLIC_INTERFACE
@app.put(
    "/categories/{category_id}",
    response_model=CategoryResponse,
    tags=["Categories"],
    summary="Rename a category",
)
def update_category(
    payload: CategoryRequest,
    category_id: int = Path(..., ge=1),
    store: DocumentStore = Depends(get_store),
):
    """
    Rename a category and copy the new name onto its notes. Statistics are
    not recomputed.
    """
    category = sync.rename_category(store, category_id, payload.name)
    if category is None:
        raise NotFound("categories", category_id)
    after_mutation(store, Mutation.CATEGORY_UPDATED)
    return category


# PUBLIC_INTERFACE
@app.delete(
    "/categories/{category_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    tags=["Categories"],
    summary="Delete a category and its notes",
)
def delete_category(category_id: int = Path(..., ge=1), store: DocumentStore = Depends(get_store)):
    _require(store, "categories", category_id)
    sync.delete_category(store, category_id)
    after_mutation(store, Mutation.CATEGORY_DELETED)
    return None


# -------- Notes Routes --------

# PUBLIC_INTERFACE
@app.get("/notes", response_model=List[NoteResponse], tags=["Notes"], summary="List all notes")
def get_notes(store: DocumentStore = Depends(get_store)):
    return store.find("notes")


# PUBLIC_INTERFACE
@app.post(
    "/notes",
    response_model=NoteResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["Notes"],
    summary="Create a new note",
)
def create_note(payload: NoteCreateRequest, store: DocumentStore = Depends(get_store)):
    """
    Create a note for an existing user in an existing category.

    Body:
        user_id: owning user
        category_id: category
        content: note content

    Raises:
        404 if the user or category does not exist; nothing is written then.
    """
    return note_ops.create_note(store, payload.user_id, payload.category_id, payload.content)


# PUBLIC_INTERFACE
@app.get("/notes/{note_id}", response_model=NoteResponse, tags=["Notes"], summary="Get a note by ID")
def get_note(note_id: int = Path(..., ge=1), store: DocumentStore = Depends(get_store)):
    return _require(store, "notes", note_id)


# PUBLIC_INTERFACE
@app.put("/notes/{note_id}", response_model=NoteResponse, tags=["Notes"], summary="Update a note by ID")
def update_note(
    payload: NoteUpdateRequest,
    note_id: int = Path(..., ge=1),
    store: DocumentStore = Depends(get_store),
):
    """
    Change a note's content and category. The owner stays the same.
    """
    return note_ops.edit_note(store, note_id, payload.content, payload.category_id)


# PUBLIC_INTERFACE
@app.delete(
    "/notes/{note_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    tags=["Notes"],
    summary="Delete a note by ID",
)
def delete_note(note_id: int = Path(..., ge=1), store: DocumentStore = Depends(get_store)):
    note_ops.delete_note(store, note_id)
    return None


# Report database reachability once at boot
@app.on_event("startup")
def on_startup():
    if check_connection(engine):
        # Initialize database tables
        Base.metadata.create_all(bind=engine)
