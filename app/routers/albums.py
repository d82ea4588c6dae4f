from fastapi import APIRouter, Depends, Query, Request, status

from .. import schemas
from ..config import settings
from ..dependencies import get_album_repository, get_artist_repository
from ..errors import missing_reference, not_found
from ..pagination import paginate, request_path
from ..repositories import AlbumRepository, ArtistRepository, ALBUM_WITH_SONGS

router = APIRouter(
    prefix="/albums",
    tags=["Albums"]
)


def _check_artist(artists: ArtistRepository, artist_id: int):
    # 外部キー (artist_id) の存在チェック
    if not artists.exists(artist_id):
        raise missing_reference("artist_id", "The selected artist id is invalid.")


# [GET] /api/albums?page=
# ----------------------------------------------------
@router.get("", response_model=schemas.Page[schemas.AlbumWithArtist])
def list_albums(
    request: Request,
    page: int = Query(1, ge=1, description="ページ番号"),
    albums: AlbumRepository = Depends(get_album_repository)
):
    return paginate(
        albums.list_query(),
        page,
        settings.page_size,
        request_path(request),
        serializer=schemas.AlbumWithArtist.model_validate,
    )


# --- ★アルバム登録APIエンドポイント★ ---
#
# [POST] /api/albums
# ----------------------------------------------------
@router.post("", response_model=schemas.Album, status_code=status.HTTP_201_CREATED)
def create_album(
    album: schemas.AlbumCreate,
    albums: AlbumRepository = Depends(get_album_repository),
    artists: ArtistRepository = Depends(get_artist_repository)
):
    """
    新しいアルバムを登録します。

    同じアーティストに同名のアルバムが既にある場合は 409 と既存のアルバムを返します。
    """
    _check_artist(artists, album.artist_id)
    return albums.create(album.model_dump())


# [GET] /api/albums/{album_id}
# ----------------------------------------------------
@router.get("/{album_id}", response_model=schemas.AlbumWithSongs)
def read_album(album_id: int, albums: AlbumRepository = Depends(get_album_repository)):
    db_album = albums.get(album_id, ALBUM_WITH_SONGS)
    if db_album is None:
        raise not_found("Album")
    return db_album


# [PUT/PATCH] /api/albums/{album_id}
# ----------------------------------------------------
@router.put("/{album_id}", response_model=schemas.Album)
@router.patch("/{album_id}", response_model=schemas.Album)
def update_album(
    album_id: int,
    album: schemas.AlbumUpdate,
    albums: AlbumRepository = Depends(get_album_repository),
    artists: ArtistRepository = Depends(get_artist_repository)
):
    db_album = albums.get(album_id)
    if db_album is None:
        raise not_found("Album")

    data = album.model_dump(exclude_unset=True)
    if "artist_id" in data:
        _check_artist(artists, data["artist_id"])

    return albums.update(db_album, data)


# [DELETE] /api/albums/{album_id}
# ----------------------------------------------------
@router.delete("/{album_id}", response_model=schemas.Message)
def delete_album(album_id: int, albums: AlbumRepository = Depends(get_album_repository)):
    """
    アルバムを削除します (収録曲も一緒に削除)。
    """
    albums.delete(album_id)
    return {"message": "Album deleted"}
