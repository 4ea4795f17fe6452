# tests/test_main.py
from fastapi.testclient import TestClient
from farmstore import main, sdk
from farmstore.database import TableError
from farmstore.main import app

client = TestClient(app)


def test_data_service_errors_become_500(monkeypatch, caplog):
    async def broken():
        raise TableError("unknown table: categoriez")

    monkeypatch.setattr(sdk, "list_categories_logic", broken)
    r = client.get("/categories")
    assert r.status_code == 500
    assert r.json() == {"detail": "unknown table: categoriez"}
    assert "data service error on GET /categories" in caplog.text


def test_run_serves_the_app_with_configured_address(monkeypatch):
    calls = []
    import uvicorn
    monkeypatch.setattr(uvicorn, "run", lambda target, **kw: calls.append((target, kw)))
    main.run()
    assert calls == [("farmstore.main:app", {"host": main.settings.host, "port": main.settings.port})]
