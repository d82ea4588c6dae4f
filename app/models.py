import datetime
import sqlite3

from sqlalchemy import create_engine, event, Column, Integer, String, ForeignKey, DateTime, UniqueConstraint
from sqlalchemy.engine import Engine
from sqlalchemy.orm import relationship, sessionmaker, declarative_base

from .config import settings

# --- 1. データベース接続設定 ---
# (既定はSQLite。DATABASE_URL で PostgreSQL 等に切り替え可能)
connect_args = {"check_same_thread": False} if settings.database_url.startswith("sqlite") else {}
engine = create_engine(settings.database_url, echo=settings.sql_echo, connect_args=connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLiteは接続ごとに外部キー制約を有効化しないと ON DELETE CASCADE が効かない
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


# --- 2. テーブル定義 ---

class Artist(Base):
    __tablename__ = 'artists'

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False, unique=True)
    genre = Column(String(255), nullable=True)
    country = Column(String(255), nullable=True)
    created_at = Column(DateTime, default=datetime.datetime.now)
    updated_at = Column(DateTime, default=datetime.datetime.now, onupdate=datetime.datetime.now)

    # Artist 1 - N Album (アーティスト削除時はアルバムも削除)
    albums = relationship(
        "Album",
        back_populates="artist",
        cascade="all, delete-orphan",
        order_by="Album.id"
    )


class Album(Base):
    __tablename__ = 'albums'

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False, index=True)
    year = Column(Integer, nullable=True)
    artist_id = Column(Integer, ForeignKey('artists.id', ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.datetime.now)
    updated_at = Column(DateTime, default=datetime.datetime.now, onupdate=datetime.datetime.now)

    # 同じアーティストに同名アルバムは1枚まで
    __table_args__ = (
        UniqueConstraint('title', 'artist_id', name='_album_title_artist_uc'),
    )

    artist = relationship("Artist", back_populates="albums")
    songs = relationship(
        "Song",
        back_populates="album",
        cascade="all, delete-orphan",
        order_by="Song.id"
    )


class Song(Base):
    __tablename__ = 'songs'

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False, index=True)
    duration = Column(Integer, nullable=True) # 秒
    album_id = Column(Integer, ForeignKey('albums.id', ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.datetime.now)
    updated_at = Column(DateTime, default=datetime.datetime.now, onupdate=datetime.datetime.now)

    # 同じアルバムに同名曲は1曲まで
    __table_args__ = (
        UniqueConstraint('title', 'album_id', name='_song_title_album_uc'),
    )

    album = relationship("Album", back_populates="songs")


class User(Base):
    """
    ユーザー・マスター (/api/user のトークン認証用)
    """
    __tablename__ = 'users'

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(100), nullable=False, unique=True, index=True) # ログインID
    email = Column(String(255), nullable=False, unique=True, index=True)
    hashed_password = Column(String(255), nullable=False) # ハッシュ化されたパスワード
    created_at = Column(DateTime, default=datetime.datetime.now)


# --- 3. データベースの初期化関数 ---
def create_db_and_tables(bind=None):
    # この関数を呼び出すと、SQLiteファイルと全テーブルが作成されます
    Base.metadata.create_all(bind=bind or engine)

# データベースセッションを取得するための依存関係
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
