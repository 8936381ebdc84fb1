"""FastAPI facade exposing the catalog operations to UI clients."""

from contextlib import asynccontextmanager
from typing import List

from fastapi import Depends, FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from logic.catalog_views import confidence_band
from logic.validation import (
    ClothingItemCreate,
    ClothingItemUpdate,
    OutfitCreate,
    OutfitUpdate,
    ShoppingRequest,
    SuggestionRequest,
    validation_failure,
)
from tools.wardrobe_catalog import WardrobeCatalog
from wardrobe_app.app import WardrobeApp


def create_app(wardrobe_app: WardrobeApp | None = None) -> FastAPI:
    """Build the ASGI app; the wardrobe is created and loaded on startup."""

    @asynccontextmanager
    async def lifespan(api: FastAPI):
        planner = wardrobe_app or WardrobeApp()
        api.state.wardrobe = planner
        await planner.start()
        yield

    api = FastAPI(title="Wardrobe Planner", version="0.1.0", lifespan=lifespan)

    @api.exception_handler(ValidationError)
    async def _pydantic_error(_: Request, exc: ValidationError) -> JSONResponse:
        return JSONResponse(status_code=422, content=validation_failure("Invalid request", exc))

    @api.exception_handler(ValueError)
    async def _value_error(_: Request, exc: ValueError) -> JSONResponse:
        return JSONResponse(status_code=422, content={"status": "invalid", "message": str(exc), "details": []})

    _register_routes(api)
    return api


def get_catalog(request: Request) -> WardrobeCatalog:
    return request.app.state.wardrobe.catalog


def _not_found(kind: str, entity_id: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{kind} '{entity_id}' not found")


def _register_routes(api: FastAPI) -> None:
    @api.get("/healthz")
    async def healthcheck(request: Request) -> dict:
        """Readiness probe; ``loading`` stays true until the catalog has been read."""

        planner: WardrobeApp = request.app.state.wardrobe
        return {
            "status": "ok",
            "service": "wardrobe-planner",
            "environment": planner.config.environment or "local",
            "loading": planner.catalog.loading,
        }

    @api.get("/clothing-items")
    async def list_clothing_items(
        query: str = "",
        category: str = "all",
        sort_by: str = "dateAdded",
        catalog: WardrobeCatalog = Depends(get_catalog),
    ) -> List[dict]:
        items = catalog.browse_clothing_items(query=query, category=category, sort_by=sort_by)
        return [item.to_record() for item in items]

    @api.post("/clothing-items", status_code=status.HTTP_201_CREATED)
    async def add_clothing_item(body: ClothingItemCreate, catalog: WardrobeCatalog = Depends(get_catalog)) -> dict:
        item = await catalog.add_clothing_item(body.model_dump())
        return item.to_record()

    @api.patch("/clothing-items/{item_id}")
    async def update_clothing_item(
        item_id: str, body: ClothingItemUpdate, catalog: WardrobeCatalog = Depends(get_catalog)
    ) -> dict:
        item = await catalog.update_clothing_item(item_id, body.model_dump(exclude_unset=True))
        if item is None:
            raise _not_found("Clothing item", item_id)
        return item.to_record()

    @api.delete("/clothing-items/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
    async def delete_clothing_item(item_id: str, catalog: WardrobeCatalog = Depends(get_catalog)) -> None:
        if not await catalog.delete_clothing_item(item_id):
            raise _not_found("Clothing item", item_id)

    @api.post("/clothing-items/{item_id}/wear")
    async def wear_clothing_item(item_id: str, catalog: WardrobeCatalog = Depends(get_catalog)) -> dict:
        item = await catalog.record_item_worn(item_id)
        if item is None:
            raise _not_found("Clothing item", item_id)
        return item.to_record()

    @api.post("/clothing-items/{item_id}/favorite")
    async def favorite_clothing_item(item_id: str, catalog: WardrobeCatalog = Depends(get_catalog)) -> dict:
        item = await catalog.toggle_clothing_favorite(item_id)
        if item is None:
            raise _not_found("Clothing item", item_id)
        return item.to_record()

    @api.get("/outfits")
    async def list_outfits(sort_by: str = "dateCreated", catalog: WardrobeCatalog = Depends(get_catalog)) -> List[dict]:
        return [outfit.to_record() for outfit in catalog.sorted_outfits(sort_by=sort_by)]

    @api.post("/outfits", status_code=status.HTTP_201_CREATED)
    async def add_outfit(body: OutfitCreate, catalog: WardrobeCatalog = Depends(get_catalog)) -> dict:
        outfit = await catalog.add_outfit(body.model_dump())
        return outfit.to_record()

    @api.patch("/outfits/{outfit_id}")
    async def update_outfit(outfit_id: str, body: OutfitUpdate, catalog: WardrobeCatalog = Depends(get_catalog)) -> dict:
        outfit = await catalog.update_outfit(outfit_id, body.model_dump(exclude_unset=True))
        if outfit is None:
            raise _not_found("Outfit", outfit_id)
        return outfit.to_record()

    @api.delete("/outfits/{outfit_id}", status_code=status.HTTP_204_NO_CONTENT)
    async def delete_outfit(outfit_id: str, catalog: WardrobeCatalog = Depends(get_catalog)) -> None:
        if not await catalog.delete_outfit(outfit_id):
            raise _not_found("Outfit", outfit_id)

    @api.post("/outfits/{outfit_id}/wear")
    async def wear_outfit(outfit_id: str, catalog: WardrobeCatalog = Depends(get_catalog)) -> dict:
        outfit = await catalog.record_outfit_worn(outfit_id)
        if outfit is None:
            raise _not_found("Outfit", outfit_id)
        return outfit.to_record()

    @api.post("/outfits/{outfit_id}/favorite")
    async def favorite_outfit(outfit_id: str, catalog: WardrobeCatalog = Depends(get_catalog)) -> dict:
        outfit = await catalog.toggle_outfit_favorite(outfit_id)
        if outfit is None:
            raise _not_found("Outfit", outfit_id)
        return outfit.to_record()

    @api.post("/suggestions")
    async def suggest_outfits(body: SuggestionRequest, catalog: WardrobeCatalog = Depends(get_catalog)) -> List[dict]:
        suggestions = catalog.generate_outfit_suggestions(body.occasion, body.weather, body.age, body.gender)
        return [
            {**suggestion.to_record(), "confidenceBand": confidence_band(suggestion.confidence)}
            for suggestion in suggestions
        ]

    @api.get("/summary")
    async def wardrobe_summary(catalog: WardrobeCatalog = Depends(get_catalog)) -> dict:
        summary = catalog.wardrobe_summary()
        return {
            "totalItems": summary.total_items,
            "totalOutfits": summary.total_outfits,
            "favoriteItems": summary.favorite_items,
            "itemsPerCategory": summary.items_per_category,
            "recentOutfits": [outfit.to_record() for outfit in summary.recent_outfits],
        }

    @api.post("/shopping-suggestions")
    async def shopping_suggestions(body: ShoppingRequest, catalog: WardrobeCatalog = Depends(get_catalog)) -> List[dict]:
        return catalog.get_shopping_suggestions(body.budget, body.preferences)


app = create_app()


def get_app() -> FastAPI:
    """Expose the FastAPI instance for ASGI servers."""

    return app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("server.api:app", host="0.0.0.0", port=8080, reload=False)
