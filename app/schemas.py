from datetime import datetime
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

T = TypeVar("T")


def _reject_null(value, info):
    # 更新時: 省略はOKだが、明示的な null は不可 (必須項目)
    if value is None:
        raise ValueError(f"{info.field_name} may not be null")
    return value


# --- Artist (アーティスト) ---

# APIが「受け取る」データの型 (登録時)
class ArtistCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True) # 前後の空白を除去してから検証

    name: str = Field(..., min_length=1, max_length=255)
    genre: Optional[str] = Field(None, max_length=255)
    country: Optional[str] = Field(None, max_length=255)

# 更新時 (送られてきた項目だけを反映する。未知の項目は 422)
class ArtistUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    genre: Optional[str] = Field(None, max_length=255)
    country: Optional[str] = Field(None, max_length=255)

    @field_validator("name")
    @classmethod
    def name_not_null(cls, value, info):
        return _reject_null(value, info)

# APIが「返す」データの型 (登録後・参照時)
class Artist(BaseModel):
    model_config = ConfigDict(from_attributes=True) # SQLAlchemyモデルから変換

    id: int
    name: str
    genre: Optional[str] = None
    country: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# --- Album (アルバム) ---
class AlbumCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(..., min_length=1, max_length=255)
    year: Optional[int] = None
    artist_id: int

class AlbumUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    title: Optional[str] = Field(None, min_length=1, max_length=255)
    year: Optional[int] = None
    artist_id: Optional[int] = None

    @field_validator("title", "artist_id")
    @classmethod
    def required_not_null(cls, value, info):
        return _reject_null(value, info)

class Album(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    year: Optional[int] = None
    artist_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# --- Song (楽曲) ---
class SongCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(..., min_length=1, max_length=255)
    duration: Optional[int] = None # 秒
    album_id: int

class SongUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    title: Optional[str] = Field(None, min_length=1, max_length=255)
    duration: Optional[int] = None
    album_id: Optional[int] = None

    @field_validator("title", "album_id")
    @classmethod
    def required_not_null(cls, value, info):
        return _reject_null(value, info)

class Song(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    duration: Optional[int] = None
    album_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# --- ネストされた応答スキーマ (フェッチプランごと) ---

# Artist + Albums (一覧・検索)
class ArtistWithAlbums(Artist):
    albums: List[Album] = []

# Album + Songs
class AlbumWithSongs(Album):
    songs: List[Song] = []

# Artist + Albums + Songs (詳細)
class ArtistDetail(Artist):
    albums: List[AlbumWithSongs] = []

# Album + Artist
class AlbumWithArtist(Album):
    artist: Artist

# Song + Album + Artist
class SongDetail(Song):
    album: AlbumWithArtist


# --- 共通の応答 ---
class Message(BaseModel):
    message: str

# 楽曲の登録・更新時のラップされた応答 {message, data}
class SongEnvelope(BaseModel):
    message: str
    data: Song


# --- ページネーション ---
class PageLink(BaseModel):
    url: Optional[str] = None
    label: str
    active: bool

class Page(BaseModel, Generic[T]):
    model_config = ConfigDict(populate_by_name=True)

    current_page: int
    data: List[T]
    first_page_url: str
    from_: Optional[int] = Field(None, alias="from")
    last_page: int
    last_page_url: str
    links: List[PageLink]
    next_page_url: Optional[str] = None
    path: str
    per_page: int
    prev_page_url: Optional[str] = None
    to: Optional[int] = None
    total: int


# --- User (ユーザー) ---
class UserCreate(BaseModel):
    username: str = Field(..., min_length=1, max_length=100)
    email: EmailStr # pydanticによるメール形式のバリデーション
    password: str = Field(..., min_length=8) # APIが受け取る平文のパスワード

class User(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: EmailStr
    created_at: datetime

class Token(BaseModel):
    access_token: str
    token_type: str
