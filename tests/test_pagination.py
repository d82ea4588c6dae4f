"""
Tests for the page envelope built by app.pagination.
"""

import pytest

from app import models
from app.pagination import page_window


class TestPageWindow:

    def test_few_pages_are_all_listed(self) -> None:
        assert page_window(1, 1) == [1]
        assert page_window(5, 13) == list(range(1, 14))

    def test_near_the_start(self) -> None:
        assert page_window(2, 50) == [1, 2, 3, 4, 5, 6, 7, 8, 9, None, 49, 50]

    def test_in_the_middle(self) -> None:
        assert page_window(25, 50) == [1, 2, None, 22, 23, 24, 25, 26, 27, 28, None, 49, 50]

    def test_near_the_end(self) -> None:
        assert page_window(48, 50) == [1, 2, None, 42, 43, 44, 45, 46, 47, 48, 49, 50]

    def test_past_the_end(self) -> None:
        assert page_window(1000, 50) == [1, 2, None, 42, 43, 44, 45, 46, 47, 48, 49, 50]


class TestListEnvelope:

    @pytest.fixture
    def many_artists(self, db_session):
        db_session.add_all(models.Artist(name=f"Artist {i:04d}") for i in range(1, 1001))
        db_session.commit()

    def test_links_stay_bounded_for_large_tables(self, client, many_artists) -> None:
        body = client.get("/api/artists?page=50").json()
        assert body["last_page"] == 100
        assert len(body["links"]) <= 15

        labels = [link["label"] for link in body["links"]]
        assert labels == [
            "&laquo; Previous", "1", "2", "...",
            "47", "48", "49", "50", "51", "52", "53",
            "...", "99", "100", "Next &raquo;",
        ]
        assert labels.count("...") == 2
        assert [link["label"] for link in body["links"] if link["active"]] == ["50"]
        assert all(link["url"] is None for link in body["links"] if link["label"] == "...")

    def test_first_page_links(self, client, many_artists) -> None:
        links = client.get("/api/artists").json()["links"]
        assert len(links) == 14
        assert links[0]["url"] is None
        assert links[-1]["url"].endswith("/api/artists?page=2")

    def test_huge_page_number_returns_an_empty_page(self, client, create_artist) -> None:
        create_artist("Air")
        page = 10 ** 19

        response = client.get(f"/api/artists?page={page}")
        assert response.status_code == 200
        body = response.json()
        assert body["data"] == []
        assert body["current_page"] == page
        assert body["from"] is None
        assert body["total"] == 1

    def test_huge_page_number_on_search(self, client) -> None:
        response = client.get(f"/api/songs/search?q=x&page={10 ** 19}")
        assert response.status_code == 200
        assert response.json()["data"] == []
