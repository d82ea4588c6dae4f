from fastapi import APIRouter, Depends, Query, Request, status

from .. import schemas
from ..config import settings
from ..dependencies import get_album_repository, get_song_repository
from ..errors import missing_reference, not_found
from ..pagination import paginate, request_path
from ..repositories import AlbumRepository, SongRepository, SONG_WITH_ALBUM_AND_ARTIST

# --- 1. APIRouter のインスタンスを作成 ---
router = APIRouter(
    prefix="/songs", # このファイル内のAPIはすべて "/songs" で始まる
    tags=["Songs"]
)


def _check_album(albums: AlbumRepository, album_id: int):
    # 外部キー (album_id) の存在チェック
    if not albums.exists(album_id):
        raise missing_reference("album_id", "The selected album id is invalid.")


# [GET] /api/songs?page=
# ----------------------------------------------------
@router.get("", response_model=schemas.Page[schemas.SongDetail])
def list_songs(
    request: Request,
    page: int = Query(1, ge=1, description="ページ番号"),
    songs: SongRepository = Depends(get_song_repository)
):
    """
    楽曲の一覧を、アルバムとアーティスト付きで1ページ10件ずつ取得します。
    """
    return paginate(
        songs.list_query(),
        page,
        settings.page_size,
        request_path(request),
        serializer=schemas.SongDetail.model_validate,
    )


# --- ★楽曲登録APIエンドポイント★ ---
#
# [POST] /api/songs
# ----------------------------------------------------
@router.post("", response_model=schemas.SongEnvelope, status_code=status.HTTP_201_CREATED)
def create_song(
    song: schemas.SongCreate,
    songs: SongRepository = Depends(get_song_repository),
    albums: AlbumRepository = Depends(get_album_repository)
):
    """
    新しい楽曲を登録します。

    - **title**: 曲名 (必須, 255文字まで)
    - **duration**: 再生時間 (秒, 任意)
    - **album_id**: 収録アルバム (必須。存在しないIDなら 422)
    """
    _check_album(albums, song.album_id)
    new_song = songs.create(song.model_dump())
    return {"message": "Song created successfully", "data": new_song}


# --- 検索API (/{song_id} より先に登録する) ---
#
# [GET] /api/songs/search?q=
# ----------------------------------------------------
@router.get("/search", response_model=schemas.Page[schemas.SongDetail])
def search_songs(
    request: Request,
    q: str = Query("", description="曲名 または アーティスト名 (部分一致)"),
    page: int = Query(1, ge=1, description="ページ番号"),
    songs: SongRepository = Depends(get_song_repository)
):
    return paginate(
        songs.search_query(q),
        page,
        settings.page_size,
        request_path(request),
        {"q": q},
        serializer=schemas.SongDetail.model_validate,
    )


# [GET] /api/songs/{song_id}
# ----------------------------------------------------
@router.get("/{song_id}", response_model=schemas.SongDetail)
def read_song(song_id: int, songs: SongRepository = Depends(get_song_repository)):
    db_song = songs.get(song_id, SONG_WITH_ALBUM_AND_ARTIST)
    if db_song is None:
        raise not_found("Song")
    return db_song


# [PUT/PATCH] /api/songs/{song_id}
# ----------------------------------------------------
@router.put("/{song_id}", response_model=schemas.SongEnvelope)
@router.patch("/{song_id}", response_model=schemas.SongEnvelope)
def update_song(
    song_id: int,
    song: schemas.SongUpdate,
    songs: SongRepository = Depends(get_song_repository),
    albums: AlbumRepository = Depends(get_album_repository)
):
    db_song = songs.get(song_id)
    if db_song is None:
        raise not_found("Song")

    data = song.model_dump(exclude_unset=True)
    if "album_id" in data:
        _check_album(albums, data["album_id"])

    updated = songs.update(db_song, data)
    return {"message": "Song updated successfully", "data": updated}


# [DELETE] /api/songs/{song_id}
# ----------------------------------------------------
@router.delete("/{song_id}", response_model=schemas.Message)
def delete_song(song_id: int, songs: SongRepository = Depends(get_song_repository)):
    songs.delete(song_id)
    return {"message": "Song deleted"}
