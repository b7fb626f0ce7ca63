import asyncio
import contextlib
import functools
import logging
from typing import Any, Awaitable, Callable

from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import HTMLResponse, JSONResponse
from starlette.routing import Route

from recipe_maker.config import Config, Env
from recipe_maker.db import KeyValueStore, SQLKeyValueStore
from recipe_maker.errors import ErrorKind, GenerationError
from recipe_maker.gemini import GeminiClient, TextGenerator
from recipe_maker.models import Mode, Recipe
from recipe_maker.normalize import normalize_record
from recipe_maker.recipe_detail import RecipeDetail
from recipe_maker.repository import WishlistStore
from recipe_maker.services import GenerationService


logger = logging.getLogger(__name__)


def aJSONResponse(route: Callable[..., Awaitable[Any | tuple[Any, int]]]):
    @functools.wraps(route)
    async def wrapper(*args: Any, **kwargs: Any) -> JSONResponse:
        resp = await route(*args, **kwargs)
        if not isinstance(resp, tuple):
            content, code = resp, 200
        else:
            content, code = resp
        return JSONResponse(content, status_code=code)

    return wrapper


def recipe_json(recipe: Recipe, wishlist: WishlistStore) -> dict[str, Any]:
    return {**recipe.to_dict(), "favourite": wishlist.contains(recipe.id)}


async def read_json(request: Request) -> dict[str, Any]:
    try:
        data = await request.json()
    except ValueError:
        data = None
    return data if isinstance(data, dict) else {}


@aJSONResponse
async def generate(request: Request) -> Any:
    data = await read_json(request)
    try:
        mode = Mode(data.get("mode", Mode.BY_NAME.value))
    except ValueError:
        return {"error": f"Unknown mode: {data.get('mode')}"}, 400

    if mode is Mode.BY_INGREDIENTS:
        query = data.get("ingredients") or []
        if not isinstance(query, list) or not any(
            isinstance(i, str) and i.strip() for i in query
        ):
            return {"error": "Please add at least one ingredient."}, 400
        query = [i for i in query if isinstance(i, str)]
    else:
        query = data.get("query")
        if not isinstance(query, str) or not query.strip():
            return {"error": "Please enter a dish name."}, 400

    lock: asyncio.Lock = request.app.state.generation_lock
    if lock.locked():
        return {"error": "A generation is already in progress."}, 409

    service: GenerationService = request.app.state.service
    wishlist: WishlistStore = request.app.state.wishlist
    async with lock:
        try:
            recipes = await service.generate(mode, query)
        except GenerationError as e:
            if e.is_empty_result:
                return {
                    "recipes": [],
                    "message": f"No recipes generated for this {mode.label}.",
                    "kind": e.kind.value,
                }
            code = 500 if e.kind is ErrorKind.MISSING_CREDENTIAL else 502
            return {"error": str(e), "kind": e.kind.value, "status": e.status}, code

    message = None if recipes else f"No recipes generated for this {mode.label}."
    return {"recipes": [recipe_json(r, wishlist) for r in recipes], "message": message}


async def recipe_from_request(request: Request) -> Recipe | None:
    return normalize_record(await read_json(request))


@aJSONResponse
async def wishlist_list(request: Request) -> Any:
    wishlist: WishlistStore = request.app.state.wishlist
    return {"recipes": [recipe_json(r, wishlist) for r in await wishlist.list_all()]}


@aJSONResponse
async def wishlist_add(request: Request) -> Any:
    recipe = await recipe_from_request(request)
    if recipe is None:
        return {"error": "Not a recipe."}, 400
    wishlist: WishlistStore = request.app.state.wishlist
    await wishlist.add(recipe)
    return {"id": recipe.id, "favourite": True}, 201


@aJSONResponse
async def wishlist_toggle(request: Request) -> Any:
    recipe = await recipe_from_request(request)
    if recipe is None:
        return {"error": "Not a recipe."}, 400
    wishlist: WishlistStore = request.app.state.wishlist
    favourite = await wishlist.toggle(recipe)
    return {"id": recipe.id, "favourite": favourite}


@aJSONResponse
async def wishlist_remove(request: Request) -> Any:
    id = request.path_params["id"]
    wishlist: WishlistStore = request.app.state.wishlist
    await wishlist.remove(id)
    return {"id": id, "favourite": False}


async def wishlist_detail(request: Request) -> HTMLResponse:
    id = request.path_params["id"]
    wishlist: WishlistStore = request.app.state.wishlist
    recipe = await wishlist.get(id)
    if recipe is None:
        return HTMLResponse("No such recipe in the wishlist.", status_code=404)
    return HTMLResponse(RecipeDetail(recipe).html)


@aJSONResponse
async def wishlist_fields(request: Request) -> Any:
    """The recipe as flat `strIngredient1`, `strMeasure1`, ... fields."""
    id = request.path_params["id"]
    wishlist: WishlistStore = request.app.state.wishlist
    recipe = await wishlist.get(id)
    if recipe is None:
        return {"error": "No such recipe in the wishlist."}, 404
    return RecipeDetail(recipe).numbered_fields()


def create_app(
    config: Config | None = None,
    *,
    generator: TextGenerator | None = None,
    kv: KeyValueStore | None = None,
) -> Starlette:
    config = Config() if config is None else config
    kv = SQLKeyValueStore(config.db_url) if kv is None else kv
    generator = GeminiClient(config=config) if generator is None else generator

    @contextlib.asynccontextmanager
    async def lifespan(app: Starlette):
        if isinstance(kv, SQLKeyValueStore):
            await kv.connect()
        app.state.wishlist = await WishlistStore.open(kv)
        yield
        if isinstance(generator, GeminiClient):
            await generator.close()
        if isinstance(kv, SQLKeyValueStore):
            await kv.disconnect()

    app = Starlette(
        debug=True if config.env == Env.local else False,
        routes=[
            Route("/recipes", generate, methods=["POST"]),
            Route("/wishlist", wishlist_list, methods=["GET"]),
            Route("/wishlist", wishlist_add, methods=["POST"]),
            Route("/wishlist/toggle", wishlist_toggle, methods=["POST"]),
            Route("/wishlist/{id}", wishlist_detail, methods=["GET"]),
            Route("/wishlist/{id}", wishlist_remove, methods=["DELETE"]),
            Route("/wishlist/{id}/fields", wishlist_fields, methods=["GET"]),
        ],
        lifespan=lifespan,
    )
    app.state.service = GenerationService(generator)
    app.state.generation_lock = asyncio.Lock()
    return app
