"""
Per-country Google API settings and named sheet connections.

Stored as one plaintext JSON document:

    {
      "saudi": {
        "api_config": {"projectId": ..., "serviceAccountEmail": ..., "apiKey": ...,
                       "privateKey": ..., "clientEmail": ..., "clientId": ...},
        "connections": [{"name": "Bookings", "googleSheetId": ..., "sheetId": ...,
                         "status": "connected"}, ...]
      },
      "egypt": {...}
    }

Countries without saved data start from empty connections and no API config.
"""

import logging
from pathlib import Path

from .config import COUNTRIES, DEFAULT_SHEET_CONNECTIONS
from .loaders.sheets import (
    AUTH_API_KEY,
    AUTH_SERVICE_ACCOUNT,
    CsvExportSource,
    GoogleConnection,
)
from .storage import JsonDocument

logger = logging.getLogger(__name__)


def default_connections() -> list[dict]:
    return [
        {"name": name, "googleSheetId": "", "sheetId": "", "status": "disconnected"}
        for name in DEFAULT_SHEET_CONNECTIONS
    ]


class ConnectionStore:
    def __init__(self, path: str | Path):
        self.document = JsonDocument(path)

    @property
    def path(self) -> Path:
        return self.document.path

    def _country(self, data: dict, country: str) -> dict:
        if country not in COUNTRIES:
            raise ValueError(f"Unknown country: {country!r}")
        return data.setdefault(country, {})

    def get_api_config(self, country: str) -> dict | None:
        return self._country(self.document.read(), country).get("api_config")

    def save_api_config(self, country: str, api_config: dict) -> None:
        data = self.document.read()
        self._country(data, country)["api_config"] = api_config
        self.document.write(data)

    def get_connections(self, country: str) -> list[dict]:
        return self._country(self.document.read(), country).get("connections") or default_connections()

    def save_connections(self, country: str, connections: list[dict]) -> None:
        data = self.document.read()
        self._country(data, country)["connections"] = connections
        self.document.write(data)

    def get_sheet_connection(self, country: str, api_name: str) -> dict | None:
        """Connection whose name matches ``api_name`` case-insensitively."""
        for conn in self.get_connections(country):
            if conn.get("name", "").lower() == api_name.lower():
                return conn
        return None

    def update_sheet_connection(self, country: str, api_name: str, **fields) -> dict:
        """Set fields on a named connection, creating it when missing."""
        connections = self.get_connections(country)
        for conn in connections:
            if conn.get("name", "").lower() == api_name.lower():
                conn.update(fields)
                break
        else:
            conn = {"name": api_name, "googleSheetId": "", "sheetId": "", "status": "disconnected"}
            conn.update(fields)
            connections.append(conn)
        self.save_connections(country, connections)
        return conn

    def build_source(self, country: str, api_name: str) -> CsvExportSource | None:
        """CSV source for a configured connection, or None when incomplete."""
        conn = self.get_sheet_connection(country, api_name)
        if not conn or not conn.get("googleSheetId") or not conn.get("sheetId"):
            logger.warning("No sheet connection configured for %s in %s", api_name, country)
            return None
        return CsvExportSource(conn["googleSheetId"], gid=conn["sheetId"])

    def build_google_connection(self, country: str) -> GoogleConnection | None:
        """v4 API credentials from the saved config; service account preferred."""
        config = self.get_api_config(country)
        if not config:
            return None

        if config.get("privateKey"):
            return GoogleConnection(
                auth_type=AUTH_SERVICE_ACCOUNT,
                service_account_info={
                    "type": "service_account",
                    "project_id": config.get("projectId", ""),
                    "private_key": config["privateKey"],
                    "client_email": config.get("clientEmail") or config.get("serviceAccountEmail", ""),
                    "client_id": config.get("clientId", ""),
                    "token_uri": "https://oauth2.googleapis.com/token",
                },
            )
        if config.get("apiKey"):
            return GoogleConnection(auth_type=AUTH_API_KEY, api_key=config["apiKey"])
        return None
