"""
MangaBot Backend - Préstamo Endpoint Tests
===========================================

What:  HTTP-level tests for /api/v1/prestamo: default loan date, manga
       existence check, client search, loans by manga, inclusive date range.
How:   Same temporary-SQLite app as the manga endpoint tests.
"""

from datetime import datetime, timezone

import pytest

TEST_USER = "tester@example.com"
BASE = "/api/v1/prestamo"


def _parse(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


async def _manga(client, headers, titulo="Naruto"):
    response = await client.post("/api/v1/manga", json={"Titulo": titulo}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]["Id"]


async def _prestamo(client, headers, **fields):
    response = await client.post(BASE, json=fields, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]


class TestPrestamoCrud:

    @pytest.mark.asyncio
    async def test_create_without_date_stamps_current_time(self, test_client, auth_headers):
        manga_id = await _manga(test_client, auth_headers)

        before = datetime.now(timezone.utc).replace(microsecond=0)
        response = await test_client.post(
            BASE, json={"NombreCliente": "Ana", "MangaId": manga_id}, headers=auth_headers
        )
        after = datetime.now(timezone.utc)

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Préstamo creado exitosamente"
        assert body["createdBy"] == TEST_USER
        assert body["data"]["Id"] > 0
        assert before <= _parse(body["data"]["FechaPrestamo"]) <= after
        assert response.headers["Location"].endswith(f"{BASE}/{body['data']['Id']}")

        fetched = await test_client.get(f"{BASE}/{body['data']['Id']}", headers=auth_headers)
        assert fetched.status_code == 200
        assert fetched.json()["data"]["NombreCliente"] == "Ana"
        assert fetched.json()["data"]["MangaId"] == manga_id

    @pytest.mark.asyncio
    async def test_loan_date_reads_back_as_written(self, test_client, auth_headers):
        manga_id = await _manga(test_client, auth_headers)
        created = await _prestamo(
            test_client, auth_headers, NombreCliente="Ana", MangaId=manga_id,
            FechaPrestamo="2025-03-01T12:00:00+02:00",
        )

        fetched = (await test_client.get(f"{BASE}/{created['Id']}", headers=auth_headers)).json()["data"]
        listed = (await test_client.get(BASE, headers=auth_headers)).json()["data"]

        assert created["FechaPrestamo"] == "2025-03-01T10:00:00Z"
        assert fetched == created
        assert listed == [created]

    @pytest.mark.asyncio
    async def test_blank_client_name_is_400_and_names_are_trimmed(self, test_client, auth_headers):
        manga_id = await _manga(test_client, auth_headers)

        response = await test_client.post(
            BASE, json={"NombreCliente": "   ", "MangaId": manga_id}, headers=auth_headers
        )
        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"

        created = await _prestamo(test_client, auth_headers, NombreCliente="  Ana  ", MangaId=manga_id)
        assert created["NombreCliente"] == "Ana"

    @pytest.mark.asyncio
    async def test_out_of_range_ids_are_400(self, test_client, auth_headers):
        response = await test_client.post(
            BASE, json={"NombreCliente": "Ana", "MangaId": 99999999999999999999}, headers=auth_headers
        )
        assert response.status_code == 400

        for path in (f"{BASE}/99999999999999999999", f"{BASE}/manga/99999999999999999999"):
            response = await test_client.get(path, headers=auth_headers)
            assert response.status_code == 400
            assert response.json()["error"] == "validation_error"

    @pytest.mark.asyncio
    async def test_create_for_unknown_manga_is_400(self, test_client, auth_headers):
        response = await test_client.post(
            BASE, json={"NombreCliente": "Ana", "MangaId": 321}, headers=auth_headers
        )

        assert response.status_code == 400
        assert response.json()["message"] == "El manga con ID 321 no existe"

    @pytest.mark.asyncio
    async def test_create_without_client_name_is_400(self, test_client, auth_headers):
        manga_id = await _manga(test_client, auth_headers)

        response = await test_client.post(BASE, json={"MangaId": manga_id}, headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"

    @pytest.mark.asyncio
    async def test_update_id_mismatch_is_400(self, test_client, auth_headers):
        manga_id = await _manga(test_client, auth_headers)
        created = await _prestamo(test_client, auth_headers, NombreCliente="Ana", MangaId=manga_id)

        response = await test_client.put(
            f"{BASE}/{created['Id']}",
            json={"Id": created["Id"] + 10, "NombreCliente": "Eva", "MangaId": manga_id},
            headers=auth_headers,
        )

        assert response.status_code == 400
        assert response.json()["message"] == "El ID del préstamo no coincide"
        fetched = (await test_client.get(f"{BASE}/{created['Id']}", headers=auth_headers)).json()
        assert fetched["data"]["NombreCliente"] == "Ana"

    @pytest.mark.asyncio
    async def test_update_and_delete(self, test_client, auth_headers):
        first = await _manga(test_client, auth_headers, "Akira")
        second = await _manga(test_client, auth_headers, "Monster")
        created = await _prestamo(test_client, auth_headers, NombreCliente="Ana", MangaId=first)

        response = await test_client.put(
            f"{BASE}/{created['Id']}",
            json={
                "Id": created["Id"],
                "NombreCliente": "Ana López",
                "MangaId": second,
                "FechaPrestamo": "2025-02-14T09:30:00Z",
            },
            headers=auth_headers,
        )
        assert response.status_code == 200
        assert response.json()["updatedBy"] == TEST_USER

        fetched = (await test_client.get(f"{BASE}/{created['Id']}", headers=auth_headers)).json()["data"]
        assert fetched["NombreCliente"] == "Ana López"
        assert fetched["MangaId"] == second
        assert _parse(fetched["FechaPrestamo"]) == datetime(2025, 2, 14, 9, 30, tzinfo=timezone.utc)

        response = await test_client.delete(f"{BASE}/{created['Id']}", headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["deletedBy"] == TEST_USER

        response = await test_client.get(f"{BASE}/{created['Id']}", headers=auth_headers)
        assert response.status_code == 404
        assert response.json()["message"] == f"No se encontró el préstamo con ID {created['Id']}"

    @pytest.mark.asyncio
    async def test_deleting_manga_keeps_its_loans(self, test_client, auth_headers):
        manga_id = await _manga(test_client, auth_headers)
        await _prestamo(test_client, auth_headers, NombreCliente="Ana", MangaId=manga_id)

        response = await test_client.delete(f"/api/v1/manga/{manga_id}", headers=auth_headers)
        assert response.status_code == 200

        response = await test_client.get(f"{BASE}/manga/{manga_id}", headers=auth_headers)
        assert [p["NombreCliente"] for p in response.json()["data"]] == ["Ana"]


class TestPrestamoQueries:

    @pytest.mark.asyncio
    async def test_search_by_client(self, test_client, auth_headers):
        manga_id = await _manga(test_client, auth_headers)
        await _prestamo(test_client, auth_headers, NombreCliente="María García", MangaId=manga_id)
        await _prestamo(test_client, auth_headers, NombreCliente="Pedro Ruiz", MangaId=manga_id)

        response = await test_client.get(f"{BASE}/search", params={"cliente": "García"}, headers=auth_headers)

        assert response.status_code == 200
        body = response.json()
        assert [p["NombreCliente"] for p in body["data"]] == ["María García"]
        assert body["searchedBy"] == TEST_USER
        assert body["message"] == "Búsqueda completada para cliente: 'García'"

    @pytest.mark.asyncio
    async def test_blank_client_search_is_400(self, test_client, auth_headers):
        response = await test_client.get(f"{BASE}/search", params={"cliente": "  "}, headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["message"] == "El parámetro 'cliente' es requerido para la búsqueda"

    @pytest.mark.asyncio
    async def test_by_manga(self, test_client, auth_headers):
        naruto = await _manga(test_client, auth_headers, "Naruto")
        bleach = await _manga(test_client, auth_headers, "Bleach")
        await _prestamo(test_client, auth_headers, NombreCliente="Ana", MangaId=naruto)
        await _prestamo(test_client, auth_headers, NombreCliente="Luis", MangaId=bleach)
        await _prestamo(test_client, auth_headers, NombreCliente="Eva", MangaId=naruto)

        response = await test_client.get(f"{BASE}/manga/{naruto}", headers=auth_headers)

        assert response.status_code == 200
        body = response.json()
        assert [p["NombreCliente"] for p in body["data"]] == ["Ana", "Eva"]
        assert body["message"] == f"Préstamos del manga ID {naruto} obtenidos exitosamente"

        response = await test_client.get(f"{BASE}/manga/9999", headers=auth_headers)
        assert response.json()["data"] == []

    @pytest.mark.asyncio
    async def test_date_range_is_inclusive(self, test_client, auth_headers):
        manga_id = await _manga(test_client, auth_headers)
        for cliente, fecha in [
            ("Antes", "2025-02-28T23:59:59Z"),
            ("Inicio", "2025-03-01T10:00:00Z"),
            ("Medio", "2025-03-03T08:00:00Z"),
            ("Fin", "2025-03-05T10:00:00Z"),
            ("Despues", "2025-03-05T10:00:01Z"),
        ]:
            await _prestamo(
                test_client, auth_headers, NombreCliente=cliente, MangaId=manga_id, FechaPrestamo=fecha
            )

        response = await test_client.get(
            f"{BASE}/fechas",
            params={"fecha_inicio": "2025-03-01T10:00:00Z", "fecha_fin": "2025-03-05T10:00:00Z"},
            headers=auth_headers,
        )

        assert response.status_code == 200
        assert [p["NombreCliente"] for p in response.json()["data"]] == ["Inicio", "Medio", "Fin"]

    @pytest.mark.asyncio
    async def test_inverted_date_range_is_empty(self, test_client, auth_headers):
        manga_id = await _manga(test_client, auth_headers)
        await _prestamo(
            test_client, auth_headers, NombreCliente="Ana", MangaId=manga_id,
            FechaPrestamo="2025-03-03T08:00:00Z",
        )

        response = await test_client.get(
            f"{BASE}/fechas",
            params={"fecha_inicio": "2025-03-05T00:00:00Z", "fecha_fin": "2025-03-01T00:00:00Z"},
            headers=auth_headers,
        )

        assert response.status_code == 200
        assert response.json()["data"] == []

    @pytest.mark.asyncio
    async def test_date_range_requires_both_bounds(self, test_client, auth_headers):
        response = await test_client.get(
            f"{BASE}/fechas", params={"fecha_inicio": "2025-03-01T00:00:00Z"}, headers=auth_headers
        )

        assert response.status_code == 400
        assert response.json()["success"] is False

    @pytest.mark.asyncio
    async def test_requires_token(self, test_client):
        response = await test_client.get(f"{BASE}/manga/1")

        assert response.status_code == 401
