from fastapi import APIRouter, Depends, Query, Request, status
from typing import List, Optional

from .. import schemas
from ..config import settings
from ..dependencies import get_artist_repository
from ..errors import not_found
from ..pagination import paginate, request_path
from ..repositories import ArtistRepository, ARTIST_WITH_ALBUMS_AND_SONGS

router = APIRouter(
    prefix="/artists",
    tags=["Artists"]   # Swagger UIでのグループ名
)


# [GET] /api/artists?genre=&page=
# ----------------------------------------------------
@router.get("", response_model=schemas.Page[schemas.ArtistWithAlbums])
def list_artists(
    request: Request,
    genre: Optional[str] = Query(None, description="ジャンルの部分一致で絞り込む (任意)"),
    page: int = Query(1, ge=1, description="ページ番号"),
    artists: ArtistRepository = Depends(get_artist_repository)
):
    """
    アーティストの一覧を、アルバム付きで1ページ10件ずつ取得します。
    """
    return paginate(
        artists.list_query(genre),
        page,
        settings.page_size,
        request_path(request),
        {"genre": genre},
        serializer=schemas.ArtistWithAlbums.model_validate,
    )


# [POST] /api/artists
# ----------------------------------------------------
@router.post("", response_model=schemas.Artist, status_code=status.HTTP_201_CREATED)
def create_artist(
    artist: schemas.ArtistCreate,
    artists: ArtistRepository = Depends(get_artist_repository)
):
    """
    新しいアーティストを登録します。

    - **name**: アーティスト名 (必須。同名が既にあれば 409 と既存レコードを返す)
    - **genre**: (任意)
    - **country**: (任意)
    """
    return artists.create(artist.model_dump())


# --- 検索API (/{artist_id} より先に登録する) ---

# [GET] /api/artists/search/name?name=
# ----------------------------------------------------
@router.get("/search/name", response_model=List[schemas.ArtistWithAlbums])
def search_artists_by_name(
    name: str = Query("", description="アーティスト名 (部分一致)"),
    artists: ArtistRepository = Depends(get_artist_repository)
):
    return artists.search_by_name(name)


# [GET] /api/artists/search/genre?genre=
# ----------------------------------------------------
@router.get("/search/genre", response_model=List[schemas.ArtistWithAlbums])
def search_artists_by_genre(
    genre: str = Query("", description="ジャンル (部分一致)"),
    artists: ArtistRepository = Depends(get_artist_repository)
):
    return artists.search_by_genre(genre)


# [GET] /api/artists/{artist_id}
# ----------------------------------------------------
@router.get("/{artist_id}", response_model=schemas.ArtistDetail)
def read_artist(artist_id: int, artists: ArtistRepository = Depends(get_artist_repository)):
    """
    指定されたIDのアーティストを、アルバムとその収録曲まで含めて取得します。
    """
    db_artist = artists.get(artist_id, ARTIST_WITH_ALBUMS_AND_SONGS)
    if db_artist is None:
        raise not_found("Artist")
    return db_artist


# [PUT/PATCH] /api/artists/{artist_id}
# ----------------------------------------------------
@router.put("/{artist_id}", response_model=schemas.Artist)
@router.patch("/{artist_id}", response_model=schemas.Artist)
def update_artist(
    artist_id: int,
    artist: schemas.ArtistUpdate,
    artists: ArtistRepository = Depends(get_artist_repository)
):
    """
    指定されたIDのアーティスト情報を更新します。
    リクエストに含まれていない項目は変更しません。
    """
    db_artist = artists.get(artist_id)
    if db_artist is None:
        raise not_found("Artist")

    # exclude_unset=True で、リクエストボディに含まれていないフィールドは更新しない
    return artists.update(db_artist, artist.model_dump(exclude_unset=True))


# [DELETE] /api/artists/{artist_id}
# ----------------------------------------------------
@router.delete("/{artist_id}", response_model=schemas.Message)
def delete_artist(artist_id: int, artists: ArtistRepository = Depends(get_artist_repository)):
    """
    アーティストを削除します (アルバム・楽曲も一緒に削除)。
    存在しないIDでもエラーにはなりません。
    """
    artists.delete(artist_id)
    return {"message": "Artist deleted"}
