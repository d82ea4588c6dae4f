"""
Tests for the /api/songs endpoints, including the title/artist search.
"""

import pytest


@pytest.fixture
def album(create_artist, create_album):
    return create_album(create_artist("Daft Punk")["id"], "Discovery")


class TestCreateSong:

    def test_create_returns_wrapped_song(self, client, album) -> None:
        response = client.post("/api/songs", json={"title": "One More Time", "duration": 320, "album_id": album["id"]})
        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Song created successfully"
        assert body["data"]["title"] == "One More Time"
        assert body["data"]["duration"] == 320
        assert body["data"]["album_id"] == album["id"]

    def test_duplicate_in_album_conflicts(self, client, album, create_song) -> None:
        first = create_song(album["id"], "Voyager")

        response = client.post("/api/songs", json={"title": "Voyager", "album_id": album["id"]})
        assert response.status_code == 409
        body = response.json()
        assert body["message"] == "Song already exists in this album"
        assert body["song"]["id"] == first["id"]

    def test_unknown_album_is_a_validation_error(self, client) -> None:
        response = client.post("/api/songs", json={"title": "X", "album_id": 999999})
        assert response.status_code == 422
        assert response.json()["detail"][0]["loc"] == ["body", "album_id"]
        assert client.get("/api/songs").json()["total"] == 0

    def test_title_length_is_limited(self, client, album) -> None:
        response = client.post("/api/songs", json={"title": "x" * 256, "album_id": album["id"]})
        assert response.status_code == 422

        response = client.post("/api/songs", json={"title": "x" * 255, "album_id": album["id"]})
        assert response.status_code == 201


class TestReadSongs:

    def test_get_includes_album_and_artist(self, client, album, create_song) -> None:
        song = create_song(album["id"], "Digital Love")

        body = client.get(f"/api/songs/{song['id']}").json()
        assert body["title"] == "Digital Love"
        assert body["album"]["title"] == "Discovery"
        assert body["album"]["artist"]["name"] == "Daft Punk"

    def test_missing_song_returns_404(self, client) -> None:
        response = client.get("/api/songs/42")
        assert response.status_code == 404
        assert response.json() == {"detail": "Song not found"}

    def test_list_is_paginated(self, client, album, create_song) -> None:
        for i in range(11):
            create_song(album["id"], f"Track {i}")

        body = client.get("/api/songs").json()
        assert len(body["data"]) == 10
        assert body["last_page"] == 2
        assert body["data"][0]["album"]["artist"]["name"] == "Daft Punk"


class TestUpdateSong:

    def test_partial_update_returns_wrapped_song(self, client, album, create_song) -> None:
        song = create_song(album["id"], "Crescendolls", duration=200)

        response = client.patch(f"/api/songs/{song['id']}", json={"duration": 211})
        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Song updated successfully"
        assert body["data"]["duration"] == 211
        assert body["data"]["title"] == "Crescendolls"

    def test_unknown_album_is_rejected(self, client, album, create_song) -> None:
        song = create_song(album["id"])
        assert client.put(f"/api/songs/{song['id']}", json={"album_id": 999}).status_code == 422

    def test_missing_song_returns_404(self, client) -> None:
        assert client.put("/api/songs/8", json={"title": "Nope"}).status_code == 404


class TestDeleteSong:

    def test_delete_song(self, client, album, create_song) -> None:
        song = create_song(album["id"])
        assert client.delete(f"/api/songs/{song['id']}").json() == {"message": "Song deleted"}
        assert client.get(f"/api/songs/{song['id']}").status_code == 404

    def test_delete_missing_song_is_a_noop(self, client) -> None:
        response = client.delete("/api/songs/1000")
        assert response.status_code == 200
        assert response.json() == {"message": "Song deleted"}


class TestSearchSongs:

    @pytest.fixture
    def catalog(self, create_artist, create_album, create_song):
        daft = create_artist("Daft Punk")
        discovery = create_album(daft["id"], "Discovery")
        create_song(discovery["id"], "One More Time")
        create_song(discovery["id"], "Aerodynamic")

        lcd = create_artist("LCD Soundsystem")
        lcd_album = create_album(lcd["id"], "LCD Soundsystem")
        create_song(lcd_album["id"], "Daft Punk Is Playing at My House")
        create_song(lcd_album["id"], "Tribulations")

    def test_matches_title_or_artist_name(self, client, catalog) -> None:
        response = client.get("/api/songs/search", params={"q": "Daft Punk"})
        assert response.status_code == 200
        body = response.json()
        assert sorted(s["title"] for s in body["data"]) == [
            "Aerodynamic",
            "Daft Punk Is Playing at My House",
            "One More Time",
        ]
        assert body["total"] == 3

    def test_search_is_case_insensitive(self, client, catalog) -> None:
        body = client.get("/api/songs/search?q=tribul").json()
        assert [s["title"] for s in body["data"]] == ["Tribulations"]
        assert body["data"][0]["album"]["artist"]["name"] == "LCD Soundsystem"

    def test_search_is_paginated(self, client, album, create_song) -> None:
        for i in range(13):
            create_song(album["id"], f"Remix {i}")

        first = client.get("/api/songs/search?q=remix").json()
        assert len(first["data"]) == 10
        assert first["next_page_url"].endswith("q=remix&page=2")

        second = client.get("/api/songs/search?q=remix&page=2").json()
        assert len(second["data"]) == 3

    def test_no_match(self, client, catalog) -> None:
        body = client.get("/api/songs/search?q=zzz").json()
        assert body["data"] == []
        assert body["total"] == 0


class TestBlankTitles:

    def test_blank_title_on_create_is_rejected(self, client, album) -> None:
        response = client.post("/api/songs", json={"title": "\t ", "album_id": album["id"]})
        assert response.status_code == 422

    def test_blank_title_on_update_is_rejected(self, client, album, create_song) -> None:
        song = create_song(album["id"])
        assert client.put(f"/api/songs/{song['id']}", json={"title": "   "}).status_code == 422
