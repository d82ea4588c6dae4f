"""
エンティティごとのデータアクセス層。

各リポジトリはリクエストごとの ``Session`` を受け取って生成され、
ルーター (ハンドラ) はこのリポジトリ経由でのみDBを操作します。

一意性はDB側の UNIQUE 制約で保証し、事前の重複チェックは既存レコードを
返すための近道です。同時リクエストで事前チェックをすり抜けた場合も、
コミット時の IntegrityError を捕まえて同じ 409 (DuplicateEntryError) に変換します。
"""

import logging
from typing import List, Optional, Tuple

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload, selectinload

from . import models, schemas
from .errors import DuplicateEntryError

logger = logging.getLogger(__name__)


# --- フェッチプラン (Eager Load の組み合わせ) ---
ARTIST_WITH_ALBUMS = (selectinload(models.Artist.albums),)
ARTIST_WITH_ALBUMS_AND_SONGS = (selectinload(models.Artist.albums).selectinload(models.Album.songs),)
ALBUM_WITH_ARTIST = (joinedload(models.Album.artist),)
ALBUM_WITH_SONGS = (selectinload(models.Album.songs),)
SONG_WITH_ALBUM_AND_ARTIST = (joinedload(models.Song.album).joinedload(models.Album.artist),)


def contains_pattern(term: str) -> str:
    """部分一致用の LIKE パターン。入力中の % と _ は文字として扱う"""
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def _ilike(column, term: str):
    return column.ilike(contains_pattern(term), escape="\\")


class _Repository:
    model = None
    # 409 応答のメッセージとキー
    duplicate_message = ""
    duplicate_key = ""
    schema = None

    def __init__(self, db: Session):
        self.db = db

    # --- サブクラスで実装 ---
    def natural_key(self, obj) -> Tuple:
        raise NotImplementedError

    def find_duplicate(self, *key, exclude_id: Optional[int] = None):
        raise NotImplementedError

    # --- 共通処理 ---
    def get(self, entity_id: int, plan=()):
        return self.db.query(self.model)\
            .options(*plan)\
            .filter(self.model.id == entity_id)\
            .first()

    def exists(self, entity_id: int) -> bool:
        return self.db.query(self.model.id).filter(self.model.id == entity_id).first() is not None

    def _conflict(self, existing) -> DuplicateEntryError:
        logger.warning("Duplicate %s rejected (existing id=%s)", self.duplicate_key, existing.id)
        return DuplicateEntryError(self.duplicate_message, self.duplicate_key, self.schema.model_validate(existing))

    def _commit(self, key: Tuple, exclude_id: Optional[int] = None):
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            # 事前チェック後に他のリクエストが同じキーで登録した場合
            existing = self.find_duplicate(*key, exclude_id=exclude_id)
            if existing is None:
                raise
            raise self._conflict(existing)

    def create(self, data: dict):
        obj = self.model(**data)
        key = self.natural_key(obj)

        existing = self.find_duplicate(*key)
        if existing:
            raise self._conflict(existing)

        self.db.add(obj)
        self._commit(key)
        self.db.refresh(obj)
        logger.info("Created %s id=%s", self.duplicate_key, obj.id)
        return obj

    def update(self, obj, data: dict):
        """送られてきた項目だけを反映する (部分更新)"""
        for field, value in data.items():
            setattr(obj, field, value)
        key = self.natural_key(obj)

        existing = self.find_duplicate(*key, exclude_id=obj.id)
        if existing:
            self.db.rollback()
            raise self._conflict(existing)

        self._commit(key, exclude_id=obj.id)
        self.db.refresh(obj)
        logger.info("Updated %s id=%s fields=%s", self.duplicate_key, obj.id, sorted(data))
        return obj

    def delete(self, entity_id: int) -> bool:
        """
        主キーで1行削除する。存在しなければ何もしない (False を返す)。
        子レコードは ORM の cascade で一緒に削除される。
        """
        obj = self.db.get(self.model, entity_id)
        if obj is None:
            return False
        self.db.delete(obj)
        self.db.commit()
        logger.info("Deleted %s id=%s", self.duplicate_key, entity_id)
        return True


class ArtistRepository(_Repository):
    model = models.Artist
    schema = schemas.Artist
    duplicate_message = "Artist already exists"
    duplicate_key = "artist"

    def natural_key(self, obj):
        return (obj.name,)

    def find_duplicate(self, name, exclude_id=None):
        query = self.db.query(models.Artist).filter(models.Artist.name == name)
        if exclude_id is not None:
            query = query.filter(models.Artist.id != exclude_id)
        return query.first()

    def list_query(self, genre: Optional[str] = None):
        query = self.db.query(models.Artist).options(*ARTIST_WITH_ALBUMS)
        if genre:
            query = query.filter(_ilike(models.Artist.genre, genre))
        return query.order_by(models.Artist.id)

    def search_by_name(self, name: str) -> List[models.Artist]:
        return self.db.query(models.Artist)\
            .options(*ARTIST_WITH_ALBUMS)\
            .filter(_ilike(models.Artist.name, name))\
            .order_by(models.Artist.id)\
            .all()

    def search_by_genre(self, genre: str) -> List[models.Artist]:
        return self.db.query(models.Artist)\
            .options(*ARTIST_WITH_ALBUMS)\
            .filter(_ilike(models.Artist.genre, genre))\
            .order_by(models.Artist.id)\
            .all()


class AlbumRepository(_Repository):
    model = models.Album
    schema = schemas.Album
    duplicate_message = "Album already exists for this artist"
    duplicate_key = "album"

    def natural_key(self, obj):
        return (obj.title, obj.artist_id)

    def find_duplicate(self, title, artist_id, exclude_id=None):
        query = self.db.query(models.Album).filter(
            models.Album.title == title,
            models.Album.artist_id == artist_id
        )
        if exclude_id is not None:
            query = query.filter(models.Album.id != exclude_id)
        return query.first()

    def list_query(self):
        return self.db.query(models.Album)\
            .options(*ALBUM_WITH_ARTIST)\
            .order_by(models.Album.id)


class SongRepository(_Repository):
    model = models.Song
    schema = schemas.Song
    duplicate_message = "Song already exists in this album"
    duplicate_key = "song"

    def natural_key(self, obj):
        return (obj.title, obj.album_id)

    def find_duplicate(self, title, album_id, exclude_id=None):
        query = self.db.query(models.Song).filter(
            models.Song.title == title,
            models.Song.album_id == album_id
        )
        if exclude_id is not None:
            query = query.filter(models.Song.id != exclude_id)
        return query.first()

    def list_query(self):
        return self.db.query(models.Song)\
            .options(*SONG_WITH_ALBUM_AND_ARTIST)\
            .order_by(models.Song.id)

    def search_query(self, q: str):
        """曲名 または アルバムのアーティスト名 に q を含む楽曲"""
        return self.db.query(models.Song)\
            .options(*SONG_WITH_ALBUM_AND_ARTIST)\
            .filter(or_(
                _ilike(models.Song.title, q),
                models.Song.album.has(models.Album.artist.has(_ilike(models.Artist.name, q))),
            ))\
            .order_by(models.Song.id)


class UserRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_by_username(self, username: str) -> Optional[models.User]:
        return self.db.query(models.User).filter(models.User.username == username).first()

    def get_by_email(self, email: str) -> Optional[models.User]:
        return self.db.query(models.User).filter(models.User.email == email).first()

    def create(self, username: str, email: str, hashed_password: str) -> models.User:
        new_user = models.User(username=username, email=email, hashed_password=hashed_password)
        self.db.add(new_user)
        self.db.commit()
        self.db.refresh(new_user)
        logger.info("Registered user id=%s", new_user.id)
        return new_user
