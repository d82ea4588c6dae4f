from fastapi import APIRouter, Depends, HTTPException, status

from .. import auth_utils, models, schemas
from ..dependencies import get_current_user, get_user_repository
from ..repositories import UserRepository

router = APIRouter(tags=["Users"])


# --- ★ユーザー登録APIエンドポイント★ ---
#
# [POST] /api/register
# ----------------------------------------------------
@router.post("/register", response_model=schemas.User, status_code=status.HTTP_201_CREATED)
def register_user(
    user: schemas.UserCreate,
    users: UserRepository = Depends(get_user_repository)
):
    """
    新しいユーザーを登録します。ユーザー名・メールアドレスの重複は 409。
    """
    if users.get_by_username(user.username):
        raise HTTPException(status_code=409, detail=f"Username '{user.username}' is already taken")
    if users.get_by_email(user.email):
        raise HTTPException(status_code=409, detail=f"Email '{user.email}' is already registered")

    hashed_password = auth_utils.get_password_hash(user.password)
    return users.create(user.username, user.email, hashed_password)


# --- ★ ログイン中のユーザー (保護されたAPI) ★ ---
# GET /api/user
@router.get("/user", response_model=schemas.User)
def read_current_user(
    # ★ ここで門番 (get_current_user) を使う！
    current_user: models.User = Depends(get_current_user)
):
    """
    トークンで認証されたユーザー自身の情報を返します。
    """
    return current_user
