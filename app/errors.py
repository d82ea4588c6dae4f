from fastapi import HTTPException, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


class DuplicateEntryError(Exception):
    """
    重複登録 (409) を表す例外。

    既存レコードを応答に含めることで、クライアントは盲目的に再送せず
    既存データと突き合わせることができます。
    """

    def __init__(self, message: str, key: str, existing):
        super().__init__(message)
        self.message = message
        self.key = key
        self.existing = existing


async def duplicate_entry_handler(request: Request, exc: DuplicateEntryError):
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content={"message": exc.message, exc.key: jsonable_encoder(exc.existing)},
    )


def missing_reference(field: str, message: str) -> HTTPException:
    """
    外部キーの参照先が存在しない場合の 422。
    FastAPI 標準のバリデーションエラーと同じ形式で返す。
    """
    return HTTPException(
        status_code=422,
        detail=[{
            "loc": ["body", field],
            "msg": message,
            "type": "value_error.missing_reference",
        }],
    )


def not_found(entity: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{entity} not found")
