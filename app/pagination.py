"""
一覧APIのページネーション。

``paginate`` は SQLAlchemy のクエリを1ページ分だけ取得し、
``current_page`` / ``total`` / ``links`` などのメタ情報と一緒に返します。
"""

import math
from urllib.parse import urlencode


def _page_url(path: str, params: dict, page: int) -> str:
    query = dict(params)
    query["page"] = page
    return f"{path}?{urlencode(query)}"


# 現在ページの前後に表示するページ数
ON_EACH_SIDE = 3


def page_window(page: int, last_page: int, on_each_side: int = ON_EACH_SIDE) -> list:
    """
    ページリンクに並べるページ番号のリスト。省略箇所は None。

    ページ数が少なければ全ページ、多ければ先頭2ページ・現在ページの前後・
    末尾2ページだけを並べ、間を None (``"..."``) で埋める。
    """
    window = on_each_side * 2
    if last_page < window + 8:
        return list(range(1, last_page + 1))

    if page <= window:
        first = list(range(1, window + on_each_side + 1))
        return first + [None, last_page - 1, last_page]

    if page > last_page - window:
        last = list(range(last_page - (window + on_each_side - 1), last_page + 1))
        return [1, 2, None] + last

    slider = list(range(page - on_each_side, page + on_each_side + 1))
    return [1, 2, None] + slider + [None, last_page - 1, last_page]


def paginate(query, page: int, per_page: int, path: str, params: dict = None, serializer=None) -> dict:
    """
    ``query`` を ``page`` ページ目 (1始まり) で切り出す。

    ``params`` は page 以外のクエリパラメータ (genre, q など) で、
    ナビゲーション用URLに引き継がれる。
    ``serializer`` を渡すと各行をそれで変換してから ``data`` に入れる。
    """
    params = {k: v for k, v in (params or {}).items() if v is not None and k != "page"}

    total = query.order_by(None).count()
    offset = (page - 1) * per_page
    # 件数を超えるページはDBに問い合わせない (巨大な OFFSET はSQLiteで溢れる)
    items = query.offset(offset).limit(per_page).all() if offset < total else []
    if serializer is not None:
        items = [serializer(item) for item in items]

    last_page = max(math.ceil(total / per_page), 1)
    first_index = offset + 1

    links = [{
        "url": _page_url(path, params, page - 1) if page > 1 else None,
        "label": "&laquo; Previous",
        "active": False,
    }]
    for number in page_window(page, last_page):
        if number is None:
            links.append({"url": None, "label": "...", "active": False})
            continue
        links.append({
            "url": _page_url(path, params, number),
            "label": str(number),
            "active": number == page,
        })
    links.append({
        "url": _page_url(path, params, page + 1) if page < last_page else None,
        "label": "Next &raquo;",
        "active": False,
    })

    return {
        "current_page": page,
        "data": items,
        "first_page_url": _page_url(path, params, 1),
        "from": first_index if items else None,
        "last_page": last_page,
        "last_page_url": _page_url(path, params, last_page),
        "links": links,
        "next_page_url": _page_url(path, params, page + 1) if page < last_page else None,
        "path": path,
        "per_page": per_page,
        "prev_page_url": _page_url(path, params, page - 1) if page > 1 else None,
        "to": first_index + len(items) - 1 if items else None,
        "total": total,
    }


def request_path(request) -> str:
    """クエリ文字列を除いたリクエストURL (ページURLの基準)"""
    return str(request.url.replace(query=""))
