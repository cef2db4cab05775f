import pytest
from pydantic import BaseModel
from quart import Quart, jsonify, g

from fast_constraints import ConstraintRegistry, NotBlank, Pattern, Range, Route, validate_body
from fast_constraints.utils.routing_utils import register_routes

IPV4 = r"^[0-9]{1,3}\.[0-9]{1,3}\.[0-9]{1,3}\.[0-9]{1,3}$"


class InputSchema(BaseModel):
    number_between_one_and_ten: int
    ip_address: str

    class Meta:
        constraints = [
            Range("number_between_one_and_ten", min=1, max=10),
            Pattern("ip_address", regexp=IPV4),
        ]


class ItemSchema(BaseModel):
    name: str


async def validate_input_injected(data: InputSchema):
    return jsonify(data.model_dump())


async def validate_input_explicit():
    await validate_body(ItemSchema)
    return jsonify(g.validated.model_dump())


def make_client():
    registry = ConstraintRegistry()
    registry.register_schema(InputSchema)
    registry.register(ItemSchema, [NotBlank("name")])

    app = Quart(__name__)
    routes = [
        Route.post('/validateBody', validate_input_injected),
        Route.post('/items', validate_input_explicit),
    ]
    register_routes(app, routes, registry)
    return app.test_client()


@pytest.mark.asyncio
async def test_valid_body_is_injected():
    client = make_client()

    resp = await client.post('/validateBody', json={"number_between_one_and_ten": 3, "ip_address": "999.1.1.1"})
    assert resp.status_code == 200
    assert await resp.get_json() == {"number_between_one_and_ten": 3, "ip_address": "999.1.1.1"}


@pytest.mark.asyncio
async def test_invalid_body_returns_all_violations():
    client = make_client()

    resp = await client.post('/validateBody', json={"number_between_one_and_ten": 50, "ip_address": "1.2.3"})
    assert resp.status_code == 400
    data = await resp.get_json()
    assert data == {
        "violations": [
            {"fieldName": "ip_address", "message": f'must match "{IPV4}"'},
            {"fieldName": "number_between_one_and_ten", "message": "must be between 1 and 10"},
        ]
    }


@pytest.mark.asyncio
async def test_undecodable_body_uses_the_same_error_shape():
    client = make_client()

    resp = await client.post('/validateBody', json={"number_between_one_and_ten": "ten"})
    assert resp.status_code == 400
    data = await resp.get_json()
    assert [v["fieldName"] for v in data["violations"]] == ["ip_address", "number_between_one_and_ten"]
    assert all(v["message"] for v in data["violations"])


@pytest.mark.asyncio
async def test_non_object_body_is_a_bad_request():
    client = make_client()

    resp = await client.post('/validateBody', json=[1, 2, 3])
    assert resp.status_code == 400
    data = await resp.get_json()
    assert data["error_type"] == "invalid_body"


@pytest.mark.asyncio
async def test_explicit_validate_body():
    client = make_client()

    resp = await client.post('/items', json={"name": "   "})
    assert resp.status_code == 400
    assert await resp.get_json() == {"violations": [{"fieldName": "name", "message": "must not be blank"}]}

    resp = await client.post('/items', json={"name": "test"})
    assert resp.status_code == 200
    assert await resp.get_json() == {"name": "test"}


@pytest.mark.asyncio
async def test_generated_valid_bodies_pass(sample_data):
    client = make_client()

    body = {"number_between_one_and_ten": sample_data["number"], "ip_address": sample_data["ip_address"]}
    resp = await client.post('/validateBody', json=body)
    assert resp.status_code == 200
    assert await resp.get_json() == body

    resp = await client.post('/items', json={"name": sample_data["name"]})
    assert resp.status_code == 200


@pytest.mark.asyncio
async def test_malformed_json_is_a_bad_request():
    client = make_client()

    resp = await client.post('/items', data='{"name": ', headers={"Content-Type": "application/json"})
    assert resp.status_code == 400
    data = await resp.get_json()
    assert data["error_type"] == "invalid_body"
    assert "violations" not in data


@pytest.mark.asyncio
async def test_empty_body_reads_as_empty_object():
    client = make_client()

    resp = await client.post('/items')
    assert resp.status_code == 400
    assert await resp.get_json() == {"violations": [{"fieldName": "name", "message": "Field required"}]}
