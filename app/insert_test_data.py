import requests

# サーバーのURLとポート
BASE_URL = "http://127.0.0.1:8000/api"

# 登録されたIDを保持するグローバル辞書
ids = {
    'artist': {},
    'album': {},
    'song': {},
}

# 409 応答で既存レコードが入っているキー
CONFLICT_KEYS = {"/artists": "artist", "/albums": "album", "/songs": "song"}


# --- 共通のAPI呼び出し関数 ---
def post_data(endpoint: str, data: dict):
    url = f"{BASE_URL}{endpoint}"
    log_name = data.get('name') or data.get('title')
    print(f"POST {endpoint}: {log_name}...")

    try:
        response = requests.post(url, json=data, timeout=10)
    except requests.exceptions.ConnectionError:
        print(f"  -> エラー: サーバー({BASE_URL})に接続できません。uvicorn が起動しているか確認してください。")
        return None

    if response.status_code == 409:
        # 既に登録済み: 既存レコードのIDを使い回す
        existing = response.json().get(CONFLICT_KEYS.get(endpoint, ""), {})
        print(f"  -> 既に存在します。ID: {existing.get('id')}")
        return existing.get('id')

    if not response.ok:
        print(f"  -> エラー発生 ({response.status_code}): {response.text}")
        return None

    result = response.json()
    # 楽曲の登録は {message, data} でラップされて返ってくる
    record = result.get('data', result)
    print(f"  -> 成功。ID: {record.get('id')}")
    return record.get('id')


# --- メイン実行ロジック ---
def insert_initial_data():
    print("\n--- 1. アーティストの登録 ---")
    ids['artist']['daft_punk'] = post_data("/artists", {"name": "Daft Punk", "genre": "Electronic", "country": "France"})
    ids['artist']['coldplay'] = post_data("/artists", {"name": "Coldplay", "genre": "Pop Rock", "country": "UK"})

    print("\n--- 2. アルバムの登録 ---")
    if ids['artist']['daft_punk']:
        ids['album']['discovery'] = post_data("/albums", {"title": "Discovery", "year": 2001, "artist_id": ids['artist']['daft_punk']})
        ids['album']['ram'] = post_data("/albums", {"title": "Random Access Memories", "year": 2013, "artist_id": ids['artist']['daft_punk']})
    if ids['artist']['coldplay']:
        ids['album']['parachutes'] = post_data("/albums", {"title": "Parachutes", "year": 2000, "artist_id": ids['artist']['coldplay']})

    print("\n--- 3. 楽曲の登録 ---")
    if ids['album'].get('discovery'):
        album_id = ids['album']['discovery']
        ids['song']['one_more_time'] = post_data("/songs", {"title": "One More Time", "duration": 320, "album_id": album_id})
        ids['song']['hbfs'] = post_data("/songs", {"title": "Harder, Better, Faster, Stronger", "duration": 225, "album_id": album_id})
    if ids['album'].get('ram'):
        ids['song']['get_lucky'] = post_data("/songs", {"title": "Get Lucky", "duration": 369, "album_id": ids['album']['ram']})
    if ids['album'].get('parachutes'):
        ids['song']['yellow'] = post_data("/songs", {"title": "Yellow", "duration": 269, "album_id": ids['album']['parachutes']})

    print("\n--- データ投入完了 ---")

if __name__ == "__main__":
    insert_initial_data()
