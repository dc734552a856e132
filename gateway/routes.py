"""Gateway HTTP endpoints. Each one serves a RouteSpec from routing."""
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from gateway.app_state import AppState
from gateway.config import DEFAULT_PAGE, ROUTE_METHODS
from gateway.pipeline import render
from gateway.routing import (
    ANIME,
    DOWNLOAD,
    EPISODE,
    POPULAR,
    RECENT,
    RECOMMENDATIONS,
    SEARCH,
    UPCOMING,
)

router = APIRouter(tags=["Gateway"])


def get_app_state(request: Request) -> AppState:
    """Dependency injection for application state."""
    return request.app.state.app_state


@router.api_route(SEARCH.path_prefix + "{query:path}", methods=ROUTE_METHODS)
async def search(request: Request, query: str, page: str = DEFAULT_PAGE,
                 app_state: AppState = Depends(get_app_state)) -> JSONResponse:
    """Search the catalog by title."""
    outcome = await app_state.gateway.serve(SEARCH, query=query, page=page or DEFAULT_PAGE)
    return render(outcome, app_state.errors, request.url.path)


@router.api_route(ANIME.path_prefix + "{anime_id:path}", methods=ROUTE_METHODS)
async def anime(request: Request, anime_id: str,
                app_state: AppState = Depends(get_app_state)) -> JSONResponse:
    """Anime details by catalog id, falling back to a title search."""
    outcome = await app_state.gateway.serve(ANIME, anime_id=anime_id)
    return render(outcome, app_state.errors, request.url.path)


@router.api_route(EPISODE.path_prefix + "{episode_id:path}", methods=ROUTE_METHODS)
async def episode(request: Request, episode_id: str,
                  app_state: AppState = Depends(get_app_state)) -> JSONResponse:
    outcome = await app_state.gateway.serve(EPISODE, episode_id=episode_id)
    return render(outcome, app_state.errors, request.url.path)


@router.api_route(DOWNLOAD.path_prefix + "{episode_id:path}", methods=ROUTE_METHODS)
async def download(request: Request, episode_id: str,
                   app_state: AppState = Depends(get_app_state)) -> JSONResponse:
    outcome = await app_state.gateway.serve(DOWNLOAD, episode_id=episode_id)
    return render(outcome, app_state.errors, request.url.path)


@router.api_route(RECENT.path_prefix + "{page:path}", methods=ROUTE_METHODS)
async def recent(request: Request, page: str,
                 app_state: AppState = Depends(get_app_state)) -> JSONResponse:
    outcome = await app_state.gateway.serve(RECENT, page=page)
    return render(outcome, app_state.errors, request.url.path)


@router.api_route(RECOMMENDATIONS.path_prefix + "{query:path}", methods=ROUTE_METHODS)
async def recommendations(request: Request, query: str,
                          app_state: AppState = Depends(get_app_state)) -> JSONResponse:
    """AniList recommendations for the best match of query."""
    outcome = await app_state.gateway.serve(RECOMMENDATIONS, query=query)
    return render(outcome, app_state.errors, request.url.path)


@router.api_route(POPULAR.path_prefix + "{page:path}", methods=ROUTE_METHODS)
async def popular(request: Request, page: str,
                  app_state: AppState = Depends(get_app_state)) -> JSONResponse:
    outcome = await app_state.gateway.serve(POPULAR, page=page)
    return render(outcome, app_state.errors, request.url.path)


@router.api_route(UPCOMING.path_prefix + "{page:path}", methods=ROUTE_METHODS)
async def upcoming(request: Request, page: str,
                   app_state: AppState = Depends(get_app_state)) -> JSONResponse:
    outcome = await app_state.gateway.serve(UPCOMING, page=page)
    return render(outcome, app_state.errors, request.url.path)
