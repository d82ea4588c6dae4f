from passlib.context import CryptContext
from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import JWTError, jwt

from .config import settings

# パスワードハッシュ化の設定 (bcryptを使用)
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# --- 1. パスワード関連の関数 ---

def verify_password(plain_password, hashed_password):
    """
    入力された平文パスワードと、DB内のハッシュを比較検証する
    """
    return pwd_context.verify(plain_password, hashed_password)

def get_password_hash(password):
    """
    パスワードをハッシュ化する (ソルトは自動付与される)
    """
    return pwd_context.hash(password)

# --- 2. JWT関連の関数 ---

def create_access_token(data: dict, expires_delta: Optional[timedelta] = None):
    """
    JWTアクセストークンを生成する
    Payload: data (ユーザー名など) + exp (有効期限)
    Signature: SECRET_KEYで署名
    """
    to_encode = data.copy()

    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.access_token_expire_minutes)
    to_encode.update({"exp": datetime.now(timezone.utc) + expires_delta})

    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)

def decode_access_token(token: str):
    """
    JWTをデコードし、Payloadを返す。
    失敗した場合 (署名不正・期限切れ) は None を返す。
    """
    try:
        return jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError:
        return None
