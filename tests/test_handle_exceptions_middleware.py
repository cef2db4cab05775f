import pytest
from pydantic import BaseModel
from quart import Quart, jsonify

from fast_constraints import (
    ConstraintRegistry,
    HandleExceptionsMiddleware,
    HttpException,
    Range,
    Route,
    SchemaError,
    validate_body,
)
from fast_constraints.core import responder
from fast_constraints.utils.routing_utils import create_app


class Unregistered(BaseModel):
    value: int


class Payment(BaseModel):
    amount: int


async def uses_unregistered_type():
    await validate_body(Unregistered)
    return jsonify({})


async def not_found():
    raise HttpException(404, error_type="not_found", message="Order not found")


async def crashes():
    raise RuntimeError("boom")


async def create_payment(data: Payment):
    return jsonify({"amount": data.amount})


def make_app() -> Quart:
    registry = ConstraintRegistry()
    registry.register(Payment, [Range("amount", min=1)])

    routes = [
        Route.post('/unregistered', uses_unregistered_type),
        Route.get('/not-found', not_found),
        Route.get('/crash', crashes),
        Route.post('/payments', create_payment),
    ]
    return create_app(routes, registry)


@pytest.mark.asyncio
async def test_unregistered_type_is_a_server_error(monkeypatch):
    monkeypatch.delenv("ENV", raising=False)
    client = make_app().test_client()

    resp = await client.post('/unregistered', json={"value": 1})
    assert resp.status_code == 500
    data = await resp.get_json()
    assert data["error_type"] == "schema_error"
    assert "violations" not in data


@pytest.mark.asyncio
async def test_http_exceptions_keep_their_status(monkeypatch):
    monkeypatch.delenv("ENV", raising=False)
    client = make_app().test_client()

    resp = await client.get('/not-found')
    assert resp.status_code == 404
    data = await resp.get_json()
    assert data["error_type"] == "not_found"
    assert data["message"] == "Order not found"


@pytest.mark.asyncio
async def test_unexpected_exception_does_not_leak(monkeypatch):
    monkeypatch.delenv("ENV", raising=False)
    client = make_app().test_client()

    resp = await client.get('/crash')
    assert resp.status_code == 500
    assert "boom" not in await resp.get_data(as_text=True)


@pytest.mark.asyncio
async def test_schema_error_is_reraised_in_debug(monkeypatch):
    monkeypatch.setenv("ENV", "debug")

    async def broken():
        raise SchemaError("Path `missing` does not resolve on input")

    wrapped = HandleExceptionsMiddleware()(broken)

    with pytest.raises(SchemaError):
        await wrapped()


@pytest.mark.asyncio
async def test_valid_input_never_reaches_the_responder(monkeypatch):
    rendered = []
    original_render = responder.ErrorResponder.render

    def spy(self, outcome):
        rendered.append(outcome)
        return original_render(self, outcome)

    monkeypatch.setattr(responder.ErrorResponder, "render", spy)
    client = make_app().test_client()

    resp = await client.post('/payments', json={"amount": 10})
    assert resp.status_code == 200
    assert await resp.get_json() == {"amount": 10}
    assert rendered == []

    resp = await client.post('/payments', json={"amount": 0})
    assert resp.status_code == 400
    assert len(rendered) == 1
