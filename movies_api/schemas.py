from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from fastapi.encoders import jsonable_encoder
from pydantic import AnyUrl, BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator
from pydantic_core import PydanticCustomError


MIN_RELEASE_YEAR = 1888  # первый фильм


class Genre(str, Enum):
    action = "Action"
    comedy = "Comedy"
    drama = "Drama"
    horror = "Horror"
    sci_fi = "Sci-Fi"
    romance = "Romance"
    other = "Other"


# сообщения по полям: (поле отсутствует/пустое, значение невалидно)
FIELD_MESSAGES: Dict[str, tuple[str, str]] = {
    "title": ("Title is required", "Title must be at least 1 character"),
    "director": ("Director is required", "Director is required"),
    "releaseYear": ("Release year is required", "Release year must be valid"),
    "genre": ("Genre is required", "Invalid genre"),
    "image": ("Image must be a valid URL", "Image must be a valid URL"),
}

_url_adapter = TypeAdapter(AnyUrl)


class MovieIn(BaseModel):
    """Тело POST/PUT. На PUT документ заменяется целиком, поэтому все поля, кроме image, обязательны."""

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "title": "Arrival",
                "director": "Denis Villeneuve",
                "releaseYear": 2016,
                "genre": "Sci-Fi",
                "image": "https://example.com/arrival.jpg",
            }
        },
    )

    title: str = Field(..., min_length=1)
    director: str = Field(..., min_length=1)
    release_year: int = Field(..., alias="releaseYear", ge=MIN_RELEASE_YEAR)
    genre: Genre
    image: Optional[str] = Field(None, json_schema_extra={"format": "uri"})

    @field_validator("release_year")
    @classmethod
    def release_year_not_in_future(cls, value: int) -> int:
        # текущий год берём в момент запроса, не при импорте
        if value > datetime.now().year:
            raise PydanticCustomError("release_year_future", FIELD_MESSAGES["releaseYear"][1])
        return value

    @field_validator("image")
    @classmethod
    def image_is_absolute_url(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        try:
            url = _url_adapter.validate_python(value)
        except ValidationError:
            raise PydanticCustomError("url_parsing", FIELD_MESSAGES["image"][1])
        if not url.host:
            raise PydanticCustomError("url_parsing", FIELD_MESSAGES["image"][1])
        return value

    def to_document(self) -> Dict[str, Any]:
        """Документ для Mongo: camelCase как в API, без image, если его нет."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class MovieOut(BaseModel):
    """Ответ API. Поля необязательны: в коллекции могут лежать старые неполные документы."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: Optional[str] = None
    director: Optional[str] = None
    release_year: Optional[int] = Field(None, alias="releaseYear")
    genre: Optional[str] = None
    image: Optional[str] = None


class Violation(BaseModel):
    field: str
    msg: str
    location: str = "body"
    value: Any = None


class ValidationErrorOut(BaseModel):
    errors: List[Violation]


class ErrorOut(BaseModel):
    error: str
    message: Optional[str] = None


class DeletedOut(BaseModel):
    message: str
    id: str


def _is_blank(error: dict) -> bool:
    if error.get("type") == "missing":
        return True
    return error.get("input") in (None, "")


def _is_missing_body(error: dict) -> bool:
    if tuple(error.get("loc") or ()) != ("body",):
        return False
    return error.get("type") == "missing" or error.get("input") is None


def _required_field_errors() -> List[dict]:
    try:
        MovieIn.model_validate({})
    except ValidationError as e:
        return [{**err, "loc": ("body", *err["loc"])} for err in e.errors()]
    return []


def violations(errors: List[dict]) -> List[dict]:
    """
    Ошибки pydantic -> список нарушений по полям, в порядке объявления полей.
    Сообщения берём из FIELD_MESSAGES, для незнакомых полей оставляем pydantic-овское.
    Пустое тело или null раскрываем в нарушения по каждому обязательному полю.
    """
    expanded: List[dict] = []
    for error in errors:
        if _is_missing_body(error):
            expanded.extend(_required_field_errors())
        else:
            expanded.append(error)

    result = []
    for error in expanded:
        loc = error.get("loc") or ()
        location = str(loc[0]) if loc else "body"
        field = ".".join(str(part) for part in loc[1:]) or location
        if error.get("type") == "json_invalid":
            field = location

        messages = FIELD_MESSAGES.get(field)
        if messages is None:
            msg = error.get("msg", "Invalid value")
        else:
            msg = messages[0] if _is_blank(error) else messages[1]

        value = None if error.get("type") == "missing" else error.get("input")
        result.append({
            "field": field,
            "msg": msg,
            "location": location,
            "value": jsonable_encoder(value),
        })
    return result
