"""HTTP-Client für die BPS-Endpunkte der SIS-Mobile-API."""

from __future__ import annotations

import logging
from typing import Any, Optional, Union

import httpx
from pydantic import ValidationError

from bps.errors import BpsApiError, RecordRequestError
from config.schema import ApiConfig
from models.branch import BpsData

logger = logging.getLogger(__name__)

_JSON_HEADERS = {
    "Accept": "application/json",
    "Content-Type": "application/json",
}


def extract_server_message(response: httpx.Response) -> Optional[str]:
    """Fehlertext aus einer JSON-Antwort ("message" oder "error"), sonst None."""
    try:
        body = response.json()
    except ValueError:
        return None
    if not isinstance(body, dict):
        return None
    for key in ("message", "error"):
        value = body.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def build_http_client(settings: ApiConfig) -> httpx.AsyncClient:
    """AsyncClient mit dem konfigurierten Timeout."""
    return httpx.AsyncClient(timeout=httpx.Timeout(settings.timeout_seconds))


class BpsApiClient:
    """Client für Roster/Katalog-Abruf sowie Anlegen und Löschen von Einträgen.

    Args:
        http_client: Geteilter httpx.AsyncClient (Timeout-Politik liegt dort).
        settings: API-Konfiguration (Basis-URL, Endpunkte).
        auth_code: Vom Aufrufer bereitgestellter Auth-Code der Lehrkraft.
    """

    def __init__(self, http_client: httpx.AsyncClient, settings: ApiConfig,
                 auth_code: str) -> None:
        self._client = http_client
        self._settings = settings
        self._auth_code = auth_code

    async def fetch_bps_data(self) -> BpsData:
        """Lädt Branches, Roster, Einträge und Katalog der Lehrkraft.

        Raises:
            BpsApiError: Netzwerkfehler, HTTP-Fehler oder ungültige Antwort.
        """
        url = self._settings.url(self._settings.endpoints.get_teacher_bps)
        logger.debug(f"Lade BPS-Daten: {url}")
        try:
            response = await self._client.get(
                url, params={"authCode": self._auth_code}, headers=_JSON_HEADERS
            )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise BpsApiError(f"Netzwerkfehler beim Laden der BPS-Daten: {e}") from e

        if response.is_error:
            raise BpsApiError(
                f"BPS-Daten konnten nicht geladen werden (HTTP {response.status_code})",
                status_code=response.status_code,
                server_message=extract_server_message(response),
            )
        try:
            data = BpsData.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise BpsApiError(f"Ungültige Antwort von {url}: {e}") from e

        logger.info(
            f"BPS-Daten geladen: {len(data.branches)} Branches, "
            f"{sum(len(b.students) for b in data.branches)} Schüler"
        )
        return data

    async def store_record(self, student_id: Union[int, str],
                           discipline_item_id: Union[int, str], note: str = "") -> None:
        """Legt genau einen BPS-Eintrag an.

        Raises:
            RecordRequestError: HTTP-Fehler (mit Server-Text, falls vorhanden),
                Netzwerkfehler oder Timeout.
        """
        payload = {
            "authCode": self._auth_code,
            "student_id": student_id,
            "discipline_item_id": discipline_item_id,
            "note": (note or "").strip(),
        }
        await self._post(self._settings.endpoints.store_bps, payload,
                         f"Anlegen fehlgeschlagen ({student_id}/{discipline_item_id})")

    async def delete_record(self, discipline_record_id: Union[int, str]) -> None:
        """Löscht einen BPS-Eintrag."""
        payload = {
            "authCode": self._auth_code,
            "discipline_record_id": discipline_record_id,
        }
        await self._post(self._settings.endpoints.delete_bps, payload,
                         f"Löschen fehlgeschlagen ({discipline_record_id})")

    async def _post(self, path: str, payload: dict[str, Any], what: str) -> None:
        url = self._settings.url(path)
        try:
            response = await self._client.post(url, json=payload, headers=_JSON_HEADERS)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise RecordRequestError(f"{what}: {e.__class__.__name__}") from e

        if response.is_error:
            raise RecordRequestError(
                f"{what}: HTTP {response.status_code}",
                status_code=response.status_code,
                server_message=extract_server_message(response),
            )
