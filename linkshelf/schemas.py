import math
import re
from typing import Annotated, Generic, TypeVar

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    HttpUrl,
    TypeAdapter,
    ValidationError,
    ValidationInfo,
    field_validator,
)
from pydantic.networks import validate_email
from pydantic_core import PydanticCustomError

from linkshelf.models import Archive, Link, Tag, User
from linkshelf.services.media_storage import media_url
from linkshelf.utils.logger import setup_logger

logger = setup_logger("schemas")

NAME_PATTERN = re.compile(r"^[A-Za-z\s]+$")
USERNAME_PATTERN = re.compile(r"^[a-z0-9_.]+$")

_http_url_adapter = TypeAdapter(HttpUrl)


def _required_text(value: str) -> str:
    if not value.strip():
        raise PydanticCustomError("blank", "This field is required.")
    return value


def _email_address(value: str) -> str:
    try:
        validate_email(value)
    except PydanticCustomError:
        raise PydanticCustomError(
            "email_invalid", "This field must be a valid email address."
        ) from None
    return value


def _http_url(value: str) -> str:
    """Accept http(s) URLs only; the string is stored exactly as given."""
    try:
        _http_url_adapter.validate_python(value)
    except ValidationError:
        raise PydanticCustomError("url_invalid", "This field must be a valid URL.") from None
    return value


RequiredText = Annotated[str, AfterValidator(_required_text)]
EmailAddress = Annotated[
    str, Field(max_length=255), AfterValidator(_required_text), AfterValidator(_email_address)
]
HttpUrlText = Annotated[
    str, Field(max_length=2048), AfterValidator(_required_text), AfterValidator(_http_url)
]
PersonName = Annotated[str, Field(max_length=50), AfterValidator(_required_text)]
Username = Annotated[
    str, Field(min_length=5, max_length=15), AfterValidator(_required_text)
]
Password = Annotated[
    str, Field(min_length=8, max_length=255), AfterValidator(_required_text)
]
LinkTitle = Annotated[str, Field(max_length=80), AfterValidator(_required_text)]
ArchiveTitle = Annotated[str, Field(max_length=60), AfterValidator(_required_text)]
# Row ids stay within a 32-bit signed INTEGER column.
RecordId = Annotated[int, Field(ge=1, le=2**31 - 1)]


# ===== Requests =====


class RegisterRequest(BaseModel):
    name: PersonName
    username: Username
    email: EmailAddress
    password: Password
    password_confirmation: str | None = Field(default=None, validate_default=True)

    @field_validator("name")
    @classmethod
    def name_letters_only(cls, v: str) -> str:
        if not NAME_PATTERN.match(v):
            raise PydanticCustomError("name_letters", "Name field only contain letters")
        return v

    @field_validator("username")
    @classmethod
    def username_charset(cls, v: str) -> str:
        if not USERNAME_PATTERN.match(v):
            raise PydanticCustomError(
                "username_charset",
                "Username only contains lowercase, number, dot and underscore",
            )
        return v

    @field_validator("password_confirmation")
    @classmethod
    def passwords_match(cls, v: str | None, info: ValidationInfo) -> str | None:
        password = info.data.get("password")
        # Nothing to compare when the password itself was rejected.
        if password is not None and v != password:
            raise PydanticCustomError(
                "password_mismatch", "The password confirmation does not match."
            )
        return v


class LoginRequest(BaseModel):
    email: EmailAddress
    password: RequiredText


class LinkPayload(BaseModel):
    title: LinkTitle
    url: HttpUrlText
    description: str | None = None
    tags: list[RecordId] = Field(min_length=1, max_length=5)
    visibility: RecordId


class ArchivePayload(BaseModel):
    title: ArchiveTitle
    description: str | None = None
    tags: list[RecordId] = Field(min_length=1, max_length=5)
    visibility: RecordId


class ProfileUpdate(BaseModel):
    """Multipart text fields of a profile update; every field is optional."""

    name: PersonName | None = None
    username: Username | None = None

    @field_validator("name")
    @classmethod
    def name_letters_only(cls, v: str | None) -> str | None:
        if v is not None and not NAME_PATTERN.match(v):
            raise PydanticCustomError("name_letters", "Name field only contain letters")
        return v

    @field_validator("username")
    @classmethod
    def username_charset(cls, v: str | None) -> str | None:
        if v is not None and not USERNAME_PATTERN.match(v):
            raise PydanticCustomError(
                "username_charset",
                "Username only contains lowercase, number, dot and underscore",
            )
        return v


# ===== Resources =====


class UserRead(BaseModel):
    id: int
    image_url: str | None = None
    banner_url: str | None = None
    name: str
    username: str
    email: str

    @classmethod
    def from_user(cls, user: User) -> "UserRead":
        return cls(
            id=user.id,
            image_url=media_url(user.image),
            banner_url=media_url(user.banner),
            name=user.name,
            username=user.username,
            email=user.email,
        )


class TagRead(BaseModel):
    id: int
    name: str

    model_config = ConfigDict(from_attributes=True)


class LinkRead(BaseModel):
    id: int
    hash: str
    author: UserRead
    title: str
    slug: str
    description: str | None = None
    excerpt: str | None = None
    url: str
    views: int
    visibility: str
    tags: list[TagRead] = Field(default_factory=list)

    @classmethod
    def from_link(cls, link: Link) -> "LinkRead":
        return cls(
            id=link.id,
            hash=link.hash,
            author=UserRead.from_user(link.author),
            title=link.title,
            slug=link.slug,
            description=link.description,
            excerpt=link.excerpt,
            url=link.url,
            views=link.views,
            visibility=link.visibility.visibility,
            tags=[TagRead.model_validate(tag) for tag in link.tags],
        )


class ArchiveRead(BaseModel):
    id: int
    author: UserRead
    title: str
    slug: str
    description: str | None = None
    excerpt: str | None = None
    views: int
    visibility: str
    tags: list[TagRead] = Field(default_factory=list)
    links_count: int = 0

    @classmethod
    def from_archive(cls, archive: Archive) -> "ArchiveRead":
        return cls(
            id=archive.id,
            author=UserRead.from_user(archive.author),
            title=archive.title,
            slug=archive.slug,
            description=archive.description,
            excerpt=archive.excerpt,
            views=archive.views,
            visibility=archive.visibility.visibility,
            tags=[TagRead.model_validate(tag) for tag in archive.tags],
            links_count=archive.links_count or 0,
        )


# ===== Envelopes =====


class LinkEnvelope(BaseModel):
    link: LinkRead


class ArchiveEnvelope(BaseModel):
    archive: ArchiveRead


class LinkCollection(BaseModel):
    data: list[LinkRead]


class TagCollection(BaseModel):
    data: list[TagRead]

    @classmethod
    def from_tags(cls, tags: list[Tag]) -> "TagCollection":
        return cls(data=[TagRead.model_validate(tag) for tag in tags])


class DeletedResponse(BaseModel):
    status: bool = True
    message: str


class SuccessResponse(BaseModel):
    success: bool = True
    message: str | None = None


class VisitResponse(BaseModel):
    url: str


class AuthResponse(BaseModel):
    user: UserRead
    token: str


class UserEnvelope(BaseModel):
    user: UserRead


class UserProfileResponse(BaseModel):
    owner: bool
    user: UserRead


# ===== Pagination =====

ItemT = TypeVar("ItemT")


class PageLinks(BaseModel):
    first: str
    last: str
    prev: str | None = None
    next: str | None = None


class PageMeta(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    current_page: int
    from_: int | None = Field(default=None, alias="from")
    last_page: int
    path: str
    per_page: int
    to: int | None = None
    total: int


class Page(BaseModel, Generic[ItemT]):
    data: list[ItemT]
    links: PageLinks
    meta: PageMeta

    @classmethod
    def build(
        cls, items: list[ItemT], *, total: int, page: int, per_page: int, path: str
    ) -> "Page[ItemT]":
        last_page = max(1, math.ceil(total / per_page))
        first_index = (page - 1) * per_page + 1 if items else None
        last_index = first_index + len(items) - 1 if items else None

        def page_url(number: int) -> str:
            return f"{path}?page={number}"

        return cls(
            data=items,
            links=PageLinks(
                first=page_url(1),
                last=page_url(last_page),
                prev=page_url(page - 1) if page > 1 else None,
                next=page_url(page + 1) if page < last_page else None,
            ),
            meta=PageMeta(
                current_page=page,
                from_=first_index,
                last_page=last_page,
                path=path,
                per_page=per_page,
                to=last_index,
                total=total,
            ),
        )
