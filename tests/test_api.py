"""REST endpoints through FastAPI's TestClient."""
import pytest
from fastapi.testclient import TestClient
from pymongo.errors import ServerSelectionTimeoutError

from api import main
from db import dal
from factories import make_submission
from integrations.codeforces import CodeforcesAPI, CodeforcesAPIError


@pytest.fixture
def client(mongo_db):
    return TestClient(main.app)


@pytest.fixture
def snapshot(mongo_db):
    dal.replace_snapshot(
        [
            {"id": 10, "name": "Round 10 (Div. 2)", "division": "div2", "startTimeSeconds": 10, "problems": []},
            {"id": 20, "name": "Round 20 (Div. 2)", "division": "div2", "startTimeSeconds": 20, "problems": []},
        ],
        [{"division": "div2", "rating": 800, "problems": [{"id": "20-A", "name": "A", "contestId": 20,
                                                          "contestName": "Round 20 (Div. 2)", "tags": []}]}],
        [{"division": "div2", "topic": "math", "problems": [{"id": "20-A", "name": "A", "rating": 800,
                                                            "contestId": 20, "contestName": "Round 20 (Div. 2)"}]}],
    )


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.text == "OK"


def test_contests_newest_first(client, snapshot):
    r = client.get("/api/contests/div2")
    assert r.status_code == 200
    assert [c["id"] for c in r.json()] == [20, 10]
    assert "_id" not in r.json()[0]


def test_problem_buckets(client, snapshot):
    by_rating = client.get("/api/problems/rating/div2").json()
    by_topic = client.get("/api/problems/topics/div2").json()

    assert by_rating == [{"division": "div2", "rating": 800, "problems": [
        {"id": "20-A", "name": "A", "contestId": 20, "contestName": "Round 20 (Div. 2)", "tags": []},
    ]}]
    assert by_topic[0]["topic"] == "math"


def test_unknown_division_is_empty_not_an_error(client, snapshot):
    for path in ("/api/contests/div7", "/api/problems/rating/div7", "/api/problems/topics/abc"):
        r = client.get(path)
        assert r.status_code == 200
        assert r.json() == []


def test_visit_counter(client):
    assert client.get("/api/visits").json() == {"count": 0}
    assert client.post("/api/visits/increment").json() == {"count": 1}
    assert client.post("/api/visits/increment").json() == {"count": 2}
    assert client.get("/api/visits").json() == {"count": 2}


def test_persistence_failure_is_a_500(client, monkeypatch):
    def down(*args, **kwargs):
        raise ServerSelectionTimeoutError("localhost:27017: connection refused")

    monkeypatch.setattr(dal, "get_contests", down)
    monkeypatch.setattr(dal, "increment_visits", down)

    r = client.get("/api/contests/div2")
    assert r.status_code == 500
    assert r.json() == {"error": "Failed to fetch contests"}
    assert client.post("/api/visits/increment").status_code == 500


def test_cors_allows_configured_origin(client):
    origin = main.settings.ALLOWED_ORIGINS[0]
    r = client.get("/health", headers={"Origin": origin})
    assert r.headers["access-control-allow-origin"] == origin


def test_user_stats(client, monkeypatch):
    monkeypatch.setattr(CodeforcesAPI, "user_info", staticmethod(lambda handle: [{"handle": handle}]))
    monkeypatch.setattr(CodeforcesAPI, "user_status", staticmethod(lambda handle: [
        make_submission(1, "A", "OK", 100, rating=800, tags=["math"]),
        make_submission(1, "A", "WRONG_ANSWER", 50, rating=800, tags=["math"]),
    ]))

    r = client.get("/api/users/tourist/stats", params={"order": "asc"})

    assert r.status_code == 200
    body = r.json()
    assert [p["id"] for p in body["solvedByRating"]["800"]] == ["1-A"]
    assert body["unsolved"] == []
    assert body["user"] == {"handle": "tourist"}


def test_user_stats_upstream_failure_is_a_502(client, monkeypatch):
    def fail(handle):
        raise CodeforcesAPIError("user.info", "handles: User with handle ghost not found")

    monkeypatch.setattr(CodeforcesAPI, "user_info", staticmethod(fail))

    r = client.get("/api/users/ghost/stats")

    assert r.status_code == 502
    assert "not found" in r.json()["error"]


def test_user_stats_rejects_unknown_order(client):
    assert client.get("/api/users/tourist/stats", params={"order": "sideways"}).status_code == 422


def test_division_stats(client, snapshot):
    dal.replace_snapshot(
        dal.get_contests("div2"),
        dal.get_problems_by_rating("div2") + [
            {"division": "div2", "rating": 1200, "problems": [{"id": "10-B"}, {"id": "20-B"}]},
        ],
        dal.get_problems_by_topic("div2") + [
            {"division": "div2", "topic": "dp", "problems": [{"id": "10-B"}, {"id": "20-B"}]},
        ],
    )

    r = client.get("/api/stats/div2")

    assert r.status_code == 200
    assert r.json() == {
        "division": "div2",
        "ratingHistogram": [{"rating": 800, "count": 1}, {"rating": 1200, "count": 2}],
        "topicDistribution": [{"topic": "dp", "count": 2}, {"topic": "math", "count": 1}],
        "totalContests": 2,
        "totalProblems": 3,
        "uniqueTopics": 2,
    }


def test_division_stats_unknown_division_has_zero_counts(client, snapshot):
    r = client.get("/api/stats/div9")

    assert r.status_code == 200
    assert r.json() == {
        "division": "div9",
        "ratingHistogram": [],
        "topicDistribution": [],
        "totalContests": 0,
        "totalProblems": 0,
        "uniqueTopics": 0,
    }


def test_division_stats_persistence_failure_is_a_500(client, monkeypatch):
    def down(*args, **kwargs):
        raise ServerSelectionTimeoutError("localhost:27017: connection refused")

    monkeypatch.setattr(dal, "get_problems_by_rating", down)

    r = client.get("/api/stats/div2")

    assert r.status_code == 500
    assert r.json() == {"error": "Failed to fetch division statistics"}


def test_user_stats_sorted_by_rating(client, monkeypatch):
    monkeypatch.setattr(CodeforcesAPI, "user_info", staticmethod(lambda handle: [{"handle": handle}]))
    monkeypatch.setattr(CodeforcesAPI, "user_status", staticmethod(lambda handle: [
        make_submission(1, "A", "OK", 300, rating=800, tags=["math"]),
        make_submission(2, "C", "OK", 100, rating=1900, tags=["math"]),
        make_submission(3, "B", "OK", 200, rating=1400, tags=["math"]),
    ]))

    by_time = client.get("/api/users/tourist/stats").json()
    by_rating = client.get("/api/users/tourist/stats", params={"sort": "rating"}).json()
    by_rating_asc = client.get("/api/users/tourist/stats", params={"sort": "rating", "order": "asc"}).json()

    assert [p["id"] for p in by_time["solvedByTopic"]["math"]] == ["1-A", "3-B", "2-C"]
    assert [p["id"] for p in by_rating["solvedByTopic"]["math"]] == ["2-C", "3-B", "1-A"]
    assert [p["id"] for p in by_rating_asc["solvedByTopic"]["math"]] == ["1-A", "3-B", "2-C"]


def test_user_stats_rejects_unknown_sort(client):
    assert client.get("/api/users/tourist/stats", params={"sort": "name"}).status_code == 422
