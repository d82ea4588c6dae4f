from fastapi.security import OAuth2PasswordRequestForm
from fastapi import APIRouter, Depends, HTTPException

from .. import auth_utils, schemas
from ..dependencies import get_user_repository
from ..repositories import UserRepository

router = APIRouter(
    prefix="/token",
    tags=["Auth"]
)


# --- ★ ログインAPI (トークン発行) ★ ---
# POST /api/token
@router.post("", response_model=schemas.Token)
def login_for_access_token(
    form_data: OAuth2PasswordRequestForm = Depends(),
    users: UserRepository = Depends(get_user_repository)
):
    """
    username と password を受け取り、認証に成功したら JWT を返す
    """
    user = users.get_by_username(form_data.username)

    # ユーザーが存在しない、またはパスワードが間違っている場合
    if not user or not auth_utils.verify_password(form_data.password, user.hashed_password):
        raise HTTPException(
            status_code=401,
            detail="Incorrect username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    # Payload: sub (Subject) にユーザー名を入れる
    access_token = auth_utils.create_access_token(data={"sub": user.username})
    return {"access_token": access_token, "token_type": "bearer"}
