from fastapi.testclient import TestClient

from app.core import database, redis
from app.main import app


def test_health_shape(monkeypatch):
    async def up():
        return True

    monkeypatch.setattr(database, "check_connection", up)
    monkeypatch.setattr(redis, "check_connection", up)
    client = TestClient(app)
    r = client.get('/health')
    assert r.status_code == 200
    body = r.json()
    assert body['status'] == 'healthy'
    assert body['services'] == {'database': True, 'redis': True}
    assert body['events_transport'] == 'local'


def test_health_redis_down(monkeypatch):
    async def up():
        return True

    async def down():
        return False

    monkeypatch.setattr(database, "check_connection", up)
    monkeypatch.setattr(redis, "check_connection", down)
    client = TestClient(app)
    r = client.get('/health')
    assert r.status_code == 200
    assert r.json()['status'] == 'degraded'
    assert r.json()['services']['redis'] is False
