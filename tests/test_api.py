"""REST API endpoint tests."""

from __future__ import annotations

import asyncio

import pytest
from httpx import ASGITransport, AsyncClient

from grid_snake.server.app import create_app
from grid_snake.server.session_manager import SessionManager

BASE = "http://test"


@pytest.fixture()
def app():
    application = create_app()
    application.state.session_manager = SessionManager()
    return application


@pytest.fixture()
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url=BASE) as c:
        yield c
    await app.state.session_manager.cleanup()


class TestCreateSession:
    @pytest.mark.asyncio
    async def test_create_default(self, client):
        resp = await client.post("/sessions", json={})
        assert resp.status_code == 201
        data = resp.json()
        assert data["status"] == "active"
        assert data["round"] == 1
        assert data["frame_rate"] == 60
        assert data["movement_interval"] == 0.1
        assert "session_id" in data

    @pytest.mark.asyncio
    async def test_create_custom_config(self, client):
        resp = await client.post("/sessions", json={
            "movement_interval": 0.25,
            "starting_tail_length": 0,
            "screen_zoom": 2.0,
            "frame_rate": 30,
            "seed": 5,
        })
        assert resp.status_code == 201
        data = resp.json()
        assert data["movement_interval"] == 0.25
        assert data["frame_rate"] == 30

    @pytest.mark.asyncio
    async def test_create_invalid_interval(self, client):
        resp = await client.post("/sessions", json={"movement_interval": 0})
        assert resp.status_code == 422

    @pytest.mark.asyncio
    async def test_create_negative_tail(self, client):
        resp = await client.post("/sessions", json={"starting_tail_length": -1})
        assert resp.status_code == 422

    @pytest.mark.asyncio
    async def test_create_viewport_too_small_for_zoom(self, client):
        resp = await client.post("/sessions", json={
            "orthographic_size": 1, "screen_zoom": 4.0,
        })
        assert resp.status_code == 422

    @pytest.mark.asyncio
    async def test_rate_limited(self, client):
        for _ in range(10):
            assert (await client.post("/sessions", json={})).status_code == 201
        resp = await client.post("/sessions", json={})
        assert resp.status_code == 429


class TestListSessions:
    @pytest.mark.asyncio
    async def test_list_empty(self, client):
        resp = await client.get("/sessions")
        assert resp.status_code == 200
        assert resp.json() == []

    @pytest.mark.asyncio
    async def test_list_after_create(self, client):
        await client.post("/sessions", json={})
        resp = await client.get("/sessions")
        data = resp.json()
        assert len(data) == 1
        assert data[0]["status"] == "active"

    @pytest.mark.asyncio
    async def test_closed_session_not_listed(self, client):
        session_id = (await client.post("/sessions", json={})).json()["session_id"]
        await client.delete(f"/sessions/{session_id}")
        assert (await client.get("/sessions")).json() == []


class TestGetSession:
    @pytest.mark.asyncio
    async def test_get_existing(self, client):
        create_resp = await client.post(
            "/sessions", json={"orthographic_size": 10, "aspect": 1.0},
        )
        session_id = create_resp.json()["session_id"]
        resp = await client.get(f"/sessions/{session_id}")
        assert resp.status_code == 200
        data = resp.json()
        assert data["session_id"] == session_id
        assert data["status"] == "active"
        assert data["controller_connected"] is False
        assert data["config"]["starting_tail_length"] == 3
        state = data["state"]
        assert state["round"] == 1
        assert state["bounds"] == {"half_width": 10, "half_height": 10}
        assert state["snake"]["length"] == 4

    @pytest.mark.asyncio
    async def test_get_not_found(self, client):
        resp = await client.get("/sessions/nonexistent")
        assert resp.status_code == 404


class TestViewport:
    @pytest.mark.asyncio
    async def test_set_viewport(self, client, app):
        session_id = (await client.post("/sessions", json={})).json()["session_id"]
        resp = await client.put(
            f"/sessions/{session_id}/viewport",
            json={"orthographic_size": 20, "aspect": 1.5},
        )
        assert resp.status_code == 200
        session = app.state.session_manager.get_session(session_id)
        assert session.viewport.orthographic_size == 20
        assert session.viewport.aspect == 1.5

    @pytest.mark.asyncio
    async def test_set_viewport_invalid(self, client):
        session_id = (await client.post("/sessions", json={})).json()["session_id"]
        resp = await client.put(
            f"/sessions/{session_id}/viewport",
            json={"orthographic_size": 0, "aspect": 1.0},
        )
        assert resp.status_code == 422

    @pytest.mark.asyncio
    async def test_set_viewport_without_playfield(self, client):
        session_id = (await client.post("/sessions", json={})).json()["session_id"]
        resp = await client.put(
            f"/sessions/{session_id}/viewport",
            json={"orthographic_size": 10, "aspect": 0.05},
        )
        assert resp.status_code == 422

        await asyncio.sleep(0.1)
        data = (await client.get(f"/sessions/{session_id}")).json()
        assert data["status"] == "active"
        assert data["viewport"]["aspect"] == pytest.approx(16 / 9)

    @pytest.mark.asyncio
    async def test_set_viewport_too_small_for_zoom(self, client):
        session_id = (await client.post(
            "/sessions", json={"screen_zoom": 2.0},
        )).json()["session_id"]
        resp = await client.put(
            f"/sessions/{session_id}/viewport",
            json={"orthographic_size": 1, "aspect": 1.0},
        )
        assert resp.status_code == 422

    @pytest.mark.asyncio
    async def test_set_viewport_finished(self, client):
        session_id = (await client.post("/sessions", json={})).json()["session_id"]
        await client.delete(f"/sessions/{session_id}")
        resp = await client.put(
            f"/sessions/{session_id}/viewport",
            json={"orthographic_size": 5, "aspect": 1.0},
        )
        assert resp.status_code == 409

    @pytest.mark.asyncio
    async def test_set_viewport_not_found(self, client):
        resp = await client.put(
            "/sessions/nonexistent/viewport",
            json={"orthographic_size": 5, "aspect": 1.0},
        )
        assert resp.status_code == 404


class TestCloseSession:
    @pytest.mark.asyncio
    async def test_close(self, client):
        session_id = (await client.post("/sessions", json={})).json()["session_id"]
        resp = await client.delete(f"/sessions/{session_id}")
        assert resp.status_code == 200
        assert resp.json()["status"] == "finished"

        resp = await client.get(f"/sessions/{session_id}")
        assert resp.json()["status"] == "finished"

    @pytest.mark.asyncio
    async def test_close_twice(self, client):
        session_id = (await client.post("/sessions", json={})).json()["session_id"]
        await client.delete(f"/sessions/{session_id}")
        resp = await client.delete(f"/sessions/{session_id}")
        assert resp.status_code == 409

    @pytest.mark.asyncio
    async def test_close_not_found(self, client):
        resp = await client.delete("/sessions/nonexistent")
        assert resp.status_code == 404
