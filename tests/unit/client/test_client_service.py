"""Tests for ClientService."""

import asyncio
from uuid import uuid4

import pytest

from envios.core.modules.client.models import Client, ClientAddress, ClientDetails
from envios.errors import NotFoundError, ValidationError


def make_client(**overrides):
    data = {
        "business_name": "Farmacia Central",
        "client_code": "C-0142",
        "email": "compras@farmaciacentral.com.ar",
        "addresses": [ClientAddress(street="Av. Rivadavia 1234", city="CABA")],
    }
    data.update(overrides)
    return ClientDetails(**data)


class TestCreateClient:
    def test_create_and_lookup_by_code(self, services, database):
        created = asyncio.run(services.client.create_client(make_client()))

        found = asyncio.run(services.client.get_client_by_code("C-0142"))
        assert found.id == created.id
        assert found.business_name == "Farmacia Central"
        assert found.addresses[0].street == "Av. Rivadavia 1234"
        assert database.get_collection("clients").docs[created.id]["client_code"] == "C-0142"

    def test_duplicate_code_rejected(self, services, database):
        async def run():
            await services.client.create_client(make_client())
            await services.client.create_client(make_client(business_name="Otra Farmacia"))

        with pytest.raises(ValidationError, match="already exists"):
            asyncio.run(run())
        assert len(database.get_collection("clients").docs) == 1

    @pytest.mark.parametrize(("field", "message"), [("business_name", "Business name"), ("client_code", "Client code")])
    def test_required_fields(self, services, field, message):
        with pytest.raises(ValidationError, match=message):
            asyncio.run(services.client.create_client(make_client(**{field: "  "})))

    def test_single_default_address(self, services):
        addresses = [ClientAddress(street="A 1", is_default=True), ClientAddress(street="B 2", is_default=True)]
        with pytest.raises(ValidationError, match="default"):
            asyncio.run(services.client.create_client(make_client(addresses=addresses)))


class TestDefaultAddress:
    def test_flagged_address_wins(self):
        addresses = [ClientAddress(street="A 1"), ClientAddress(street="B 2", is_default=True)]
        client = Client(**make_client(addresses=addresses).model_dump())
        assert client.default_address.street == "B 2"

    def test_falls_back_to_first_then_none(self, services):
        first = asyncio.run(services.client.create_client(make_client()))
        bare = asyncio.run(services.client.create_client(make_client(client_code="C-9", addresses=[])))
        assert first.default_address.display() == "Av. Rivadavia 1234, CABA"
        assert bare.default_address is None


class TestQueries:
    def test_list_sorted_by_business_name(self, services):
        async def run():
            for name, code in (("zeta SA", "C-1"), ("Alfa SRL", "C-2"), ("beta", "C-3")):
                await services.client.create_client(make_client(business_name=name, client_code=code))
            return await services.client.list_clients()

        assert [client.business_name for client in asyncio.run(run())] == ["Alfa SRL", "beta", "zeta SA"]

    def test_missing_client_raises(self, services):
        with pytest.raises(NotFoundError):
            asyncio.run(services.client.get_client(uuid4()))
        with pytest.raises(NotFoundError):
            asyncio.run(services.client.get_client_by_code("C-404"))


class TestUpdateAndDelete:
    def test_partial_update(self, services):
        async def run():
            created = await services.client.create_client(make_client())
            return await services.client.update_client(created.id, {"phone": "4555-0101"})

        updated = asyncio.run(run())
        assert updated.phone == "4555-0101"
        assert updated.business_name == "Farmacia Central"

    def test_code_change_to_taken_code_rejected(self, services):
        async def run():
            await services.client.create_client(make_client())
            other = await services.client.create_client(make_client(client_code="C-0200"))
            await services.client.update_client(other.id, {"client_code": "C-0142"})

        with pytest.raises(ValidationError, match="already exists"):
            asyncio.run(run())

    def test_keeping_own_code_allowed(self, services):
        async def run():
            created = await services.client.create_client(make_client())
            return await services.client.update_client(created.id, {"client_code": "C-0142", "email": ""})

        assert asyncio.run(run()).email == ""

    def test_unknown_field_rejected(self, services):
        async def run():
            created = await services.client.create_client(make_client())
            await services.client.update_client(created.id, {"id": str(uuid4())})

        with pytest.raises(ValidationError, match="cannot be edited"):
            asyncio.run(run())

    def test_delete(self, services):
        async def run():
            created = await services.client.create_client(make_client())
            await services.client.delete_client(created.id)
            await services.client.delete_client(created.id)

        with pytest.raises(NotFoundError):
            asyncio.run(run())
