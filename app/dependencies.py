from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from . import models, auth_utils
from .repositories import AlbumRepository, ArtistRepository, SongRepository, UserRepository

# トークンを取得する場所を指定 (ログインAPIのURL "/api/token" を指す)
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/token")


# --- リポジトリ (リクエストごとのセッションを渡して生成) ---

def get_artist_repository(db: Session = Depends(models.get_db)) -> ArtistRepository:
    return ArtistRepository(db)

def get_album_repository(db: Session = Depends(models.get_db)) -> AlbumRepository:
    return AlbumRepository(db)

def get_song_repository(db: Session = Depends(models.get_db)) -> SongRepository:
    return SongRepository(db)

def get_user_repository(db: Session = Depends(models.get_db)) -> UserRepository:
    return UserRepository(db)


async def get_current_user(
    token: str = Depends(oauth2_scheme),
    users: UserRepository = Depends(get_user_repository)
):
    """
    ★ 認証の門番 ★
    ヘッダーのトークンを検証し、ログイン中のユーザーオブジェクトを返す。
    無効な場合は 401 エラーを発生させて弾く。
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    # 1. トークンのデコード
    payload = auth_utils.decode_access_token(token)
    if payload is None:
        raise credentials_exception

    # 2. ペイロードからユーザー名 (sub) を取得
    username = payload.get("sub")
    if username is None:
        raise credentials_exception

    # 3. DBからユーザーを検索
    user = users.get_by_username(username)
    if user is None:
        raise credentials_exception

    return user
