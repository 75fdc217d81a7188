import re

from movies_api.logging import logger


def parse_year(value: str | None) -> int | None:
    if not value:
        return None
    value = value.strip()
    # int() принимает и "1_984", и не-ASCII цифры
    if not re.fullmatch(r"-?\d+", value, re.ASCII):
        logger.debug("releaseYear={!r} is not a number, dropped from filter", value)
        return None
    return int(value)


def build_movie_filter(
    title: str | None,
    release_year: str | None,
    genre: str | None,
) -> dict:
    """Фильтр для GET /api/movies: все условия через AND, пустые параметры пропускаем."""
    query: dict = {}

    if title:
        query["title"] = {"$regex": re.escape(title), "$options": "i"}

    year = parse_year(release_year)
    if year is not None:
        query["releaseYear"] = year

    if genre:
        query["genre"] = genre

    return query
