# tests/test_health.py
from fastapi import status


def test_health(client) -> None:
    response = client.get("/health")
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"status": "ok"}


def test_root_describes_api(client) -> None:
    data = client.get("/").json()
    assert data["name"] == "Rubin Market API"
    assert data["docs"] == "/docs"
