import asyncio
import pytest
from nextword.engine import Engine
from nextword_web.web import app as flask_app


class StaticRemote:
    async def predict(self, text):
        return ["for", "much"]


class DownRemote:
    async def predict(self, text):
        raise ConnectionError("network down")


def _engine(**kw) -> Engine:
    eng = Engine(store_dsn="memory://", **kw)
    asyncio.run(eng.load())
    return eng

@pytest.mark.e2e
def test_frontend_predict_api_json():
    eng = _engine()
    import nextword_web.web as webmod
    webmod._engine = eng

    client = flask_app.test_client()
    rv = client.get("/api/predict?q=a%20lot%20")
    assert rv.status_code == 200
    assert rv.get_json() == ["of", "more", "better"]

    # no trailing space -> completion of the word being typed
    assert client.get("/api/predict?q=wi").get_json() == ["with"]
    assert client.get("/api/predict?q=").get_json() == []

    eng.shutdown()

@pytest.mark.e2e
def test_frontend_suggest_api_json():
    eng = _engine(remote=StaticRemote())
    import nextword_web.web as webmod
    webmod._engine = eng

    client = flask_app.test_client()
    rv = client.get("/api/suggest?q=thank%20you%20")
    assert rv.status_code == 200
    data = rv.get_json()
    assert [d["text"] for d in data] == ["for", "very", "so", "much"]
    assert [d["is_remote"] for d in data] == [False, False, False, True]

    eng.shutdown()

@pytest.mark.e2e
def test_frontend_suggest_survives_remote_outage():
    eng = _engine(remote=DownRemote())
    import nextword_web.web as webmod
    webmod._engine = eng

    client = flask_app.test_client()
    rv = client.get("/api/suggest?q=thank%20you%20")
    assert rv.status_code == 200
    assert [d["text"] for d in rv.get_json()] == ["for", "very", "so"]

    eng.shutdown()

@pytest.mark.e2e
def test_frontend_serves_model_resource():
    client = flask_app.test_client()
    rv = client.get("/model.json")
    assert rv.status_code == 200
    data = rv.get_json()
    assert set(data) == {"bigramModel", "trigramModel"}
    rv.close()
