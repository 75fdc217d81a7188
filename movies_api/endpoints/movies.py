from typing import List, Optional

from bson import ObjectId
from fastapi import APIRouter, Depends, HTTPException, Query
from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo import ReturnDocument

from movies_api.logging import logger
from movies_api.mongo import get_movies_collection
from movies_api.query import build_movie_filter
from movies_api.schemas import DeletedOut, ErrorOut, MovieIn, MovieOut, ValidationErrorOut


router = APIRouter(prefix="/api/movies", tags=["movies"])

NOT_FOUND = "Movie not found"
INVALID_ID = "Invalid ID"


def _project_movie(doc: dict) -> dict:
    doc = dict(doc)
    doc["id"] = str(doc.pop("_id"))
    return doc


def _object_id(movie_id: str) -> ObjectId:
    # кривой id -> 400 и на PUT, и на DELETE (не 500 и не 404): одна политика для клиентской ошибки
    if not ObjectId.is_valid(movie_id):
        raise HTTPException(400, INVALID_ID)
    return ObjectId(movie_id)


@router.get("", response_model=List[MovieOut])
async def list_movies(
    title: Optional[str] = Query(None, description="часть названия, без учёта регистра"),
    release_year: Optional[str] = Query(None, alias="releaseYear", description="точный год; нечисловое значение игнорируется"),
    genre: Optional[str] = Query(None, description="точное совпадение жанра"),
    movies: AsyncIOMotorCollection = Depends(get_movies_collection),
):
    """Все фильмы, опционально отфильтрованные по title, releaseYear, genre."""
    q = build_movie_filter(title, release_year, genre)
    return [_project_movie(d) async for d in movies.find(q)]


@router.post(
    "",
    status_code=201,
    response_model=MovieOut,
    responses={400: {"model": ValidationErrorOut}},
)
async def create_movie(
    payload: MovieIn,
    movies: AsyncIOMotorCollection = Depends(get_movies_collection),
):
    """Добавляет фильм, id назначает Mongo."""
    doc = payload.to_document()
    result = await movies.insert_one(doc)
    doc["_id"] = result.inserted_id
    logger.info("Movie created: {} ({})", result.inserted_id, payload.title)
    return _project_movie(doc)


@router.put(
    "/{movie_id}",
    response_model=MovieOut,
    responses={400: {"model": ValidationErrorOut}, 404: {"model": ErrorOut}},
)
async def update_movie(
    movie_id: str,
    payload: MovieIn,
    movies: AsyncIOMotorCollection = Depends(get_movies_collection),
):
    """
    Полностью заменяет документ фильма.
    Тело валидируется раньше, чем проверяется id: при невалидном теле база не трогается.
    """
    doc = await movies.find_one_and_replace(
        {"_id": _object_id(movie_id)},
        payload.to_document(),
        return_document=ReturnDocument.AFTER,
    )
    if not doc:
        raise HTTPException(404, NOT_FOUND)
    logger.info("Movie updated: {}", movie_id)
    return _project_movie(doc)


@router.delete(
    "/{movie_id}",
    response_model=DeletedOut,
    responses={400: {"model": ErrorOut}, 404: {"model": ErrorOut}},
)
async def delete_movie(
    movie_id: str,
    movies: AsyncIOMotorCollection = Depends(get_movies_collection),
):
    doc = await movies.find_one_and_delete({"_id": _object_id(movie_id)})
    if not doc:
        raise HTTPException(404, NOT_FOUND)
    logger.info("Movie deleted: {}", movie_id)
    return {"message": "Movie deleted", "id": movie_id}
