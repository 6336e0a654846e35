"""
Sheet fetchers for Google Sheets booking data.

Two interchangeable sources produce the same record shape:

    CsvExportSource  -- public CSV export (docs.google.com/.../export?format=csv)
    SheetsApiSource  -- Sheets v4 API through gspread

The gspread client authenticates with an API key, an OAuth bearer token, or
a service account. Every failure (network, HTTP status, auth, missing
sheet) is raised as FetchError so callers can fall back to sample data.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any

import google.auth.exceptions
import gspread
import requests
from google.oauth2 import credentials as user_credentials
from google.oauth2 import service_account
from gspread.utils import absolute_range_name

from ..config import (
    CSV_EXPORT_URL,
    HTTP_TIMEOUT,
    SHEETS_SCOPES,
    SPREADSHEET_URL,
    USER_AGENT,
)
from ..exceptions import FetchError
from .csv_parser import parse_csv, rows_from_values

logger = logging.getLogger(__name__)

AUTH_API_KEY = "api_key"
AUTH_OAUTH = "oauth"
AUTH_SERVICE_ACCOUNT = "service_account"

# Errors gspread and google-auth raise for network, HTTP and credential problems
_GOOGLE_ERRORS = (
    gspread.exceptions.GSpreadException,
    google.auth.exceptions.GoogleAuthError,
    requests.RequestException,
    PermissionError,
    ValueError,
)


@dataclass
class GoogleConnection:
    """Credentials for the Sheets v4 API. Only the fields for auth_type are used."""

    auth_type: str = AUTH_API_KEY
    api_key: str = ""
    access_token: str = ""
    service_account_info: dict[str, Any] = field(default_factory=dict)


def _new_session() -> requests.Session:
    session = requests.Session()
    session.headers["User-Agent"] = USER_AGENT
    return session


# ---------------------------------------------------------------------------
# CSV export
# ---------------------------------------------------------------------------

class CsvExportSource:
    """Read one tab of a link-shared spreadsheet through the CSV export URL."""

    def __init__(
        self,
        spreadsheet_id: str,
        gid: str | None = None,
        session: requests.Session | None = None,
    ):
        self.spreadsheet_id = spreadsheet_id
        self.gid = gid
        self.session = session or _new_session()

    @property
    def url(self) -> str:
        return CSV_EXPORT_URL.format(spreadsheet_id=self.spreadsheet_id)

    @property
    def params(self) -> dict[str, str]:
        params = {"format": "csv"}
        if self.gid:
            params["gid"] = str(self.gid)
        return params

    def fetch_text(self) -> str:
        if not self.spreadsheet_id:
            raise FetchError("No spreadsheet id configured")

        logger.info("Fetching CSV export for %s (gid=%s)", self.spreadsheet_id, self.gid)
        try:
            resp = self.session.get(self.url, params=self.params, timeout=HTTP_TIMEOUT)
            resp.raise_for_status()
        except requests.RequestException as exc:
            raise FetchError(f"CSV export failed: {exc}") from exc

        logger.info("Fetched CSV data: %d characters", len(resp.text))
        return resp.text

    def fetch_rows(self) -> list[dict[str, str]]:
        return parse_csv(self.fetch_text())

    def __repr__(self) -> str:
        return f"CsvExportSource({self.spreadsheet_id!r}, gid={self.gid!r})"


# ---------------------------------------------------------------------------
# Sheets v4 API
# ---------------------------------------------------------------------------

class SheetsV4Client:
    """Spreadsheet metadata and cell values through a gspread client.

    The gspread client is built from ``connection`` on first use; pass
    ``gc`` to supply one directly.
    """

    def __init__(
        self,
        connection: GoogleConnection,
        gc: gspread.Client | None = None,
    ):
        self.connection = connection
        self._gc = gc

    def _authorize(self) -> gspread.Client:
        conn = self.connection
        if conn.auth_type == AUTH_API_KEY and conn.api_key:
            return gspread.api_key(conn.api_key)
        if conn.auth_type == AUTH_OAUTH and conn.access_token:
            return gspread.authorize(user_credentials.Credentials(token=conn.access_token))
        if conn.auth_type == AUTH_SERVICE_ACCOUNT:
            if not conn.service_account_info.get("private_key"):
                raise FetchError("Service account credentials are missing a private key")
            creds = service_account.Credentials.from_service_account_info(
                conn.service_account_info, scopes=SHEETS_SCOPES
            )
            return gspread.authorize(creds)
        raise FetchError("No valid authentication method configured")

    @contextmanager
    def _google_errors(self, action: str):
        try:
            yield
        except FetchError:
            raise
        except _GOOGLE_ERRORS as exc:
            raise FetchError(f"Google Sheets API error ({action}): {exc}") from exc

    @property
    def gc(self) -> gspread.Client:
        if self._gc is None:
            with self._google_errors("authorize"):
                self._gc = self._authorize()
        return self._gc

    def get_spreadsheet_info(self, spreadsheet_id: str) -> dict:
        """Spreadsheet title plus the properties of every tab."""
        logger.info("Reading spreadsheet info for %s (auth=%s)",
                    spreadsheet_id, self.connection.auth_type)
        with self._google_errors("open spreadsheet"):
            spreadsheet = self.gc.open_by_key(spreadsheet_id)
            sheets = [
                {
                    "sheetId": ws.id,
                    "title": ws.title,
                    "index": ws.index,
                    "gridProperties": {
                        "rowCount": ws.row_count or 0,
                        "columnCount": ws.col_count or 0,
                    },
                }
                for ws in spreadsheet.worksheets()
            ]
            title = spreadsheet.title

        return {
            "spreadsheetId": spreadsheet_id,
            "title": title,
            "spreadsheetUrl": SPREADSHEET_URL.format(spreadsheet_id=spreadsheet_id),
            "sheets": sheets,
        }

    def get_sheet_data(
        self,
        spreadsheet_id: str,
        sheet_name: str,
        cell_range: str | None = None,
    ) -> list[list[Any]]:
        """Raw cell values for a tab or a range of it."""
        a1 = absolute_range_name(sheet_name, cell_range)
        with self._google_errors(f"read {a1}"):
            data = self.gc.open_by_key(spreadsheet_id).values_get(a1)
        rows = data.get("values") or []
        logger.info("Fetched %d rows from %s", len(rows), sheet_name)
        return rows

    def get_sheet_headers(self, spreadsheet_id: str, sheet_name: str) -> list[str]:
        """First row of a tab."""
        rows = self.get_sheet_data(spreadsheet_id, sheet_name, "A1:1")
        return [str(h) for h in rows[0]] if rows else []

    def test_connection(self, spreadsheet_id: str) -> dict:
        """Probe a spreadsheet and report the outcome without raising."""
        try:
            info = self.get_spreadsheet_info(spreadsheet_id)
        except FetchError as exc:
            logger.warning("Connection test failed: %s", exc)
            conn = self.connection
            return {
                "success": False,
                "message": str(exc),
                "details": {
                    "error": str(exc),
                    "authType": conn.auth_type,
                    "hasApiKey": bool(conn.api_key),
                    "hasAccessToken": bool(conn.access_token),
                    "hasPrivateKey": bool(conn.service_account_info.get("private_key")),
                },
            }

        return {
            "success": True,
            "message": (
                f"Successfully connected! Found {len(info['sheets'])} sheets "
                f"in \"{info['title']}\""
            ),
            "details": {
                "spreadsheetTitle": info["title"],
                "sheetCount": len(info["sheets"]),
                "sheetNames": [s["title"] for s in info["sheets"]],
                "url": info["spreadsheetUrl"],
            },
        }


class SheetsApiSource:
    """Read one tab through the v4 API and map it to header-keyed records."""

    def __init__(
        self,
        client: SheetsV4Client,
        spreadsheet_id: str,
        sheet_name: str,
        cell_range: str | None = None,
    ):
        self.client = client
        self.spreadsheet_id = spreadsheet_id
        self.sheet_name = sheet_name
        self.cell_range = cell_range

    def fetch_rows(self) -> list[dict[str, str]]:
        values = self.client.get_sheet_data(self.spreadsheet_id, self.sheet_name, self.cell_range)
        return rows_from_values(values)

    def __repr__(self) -> str:
        return f"SheetsApiSource({self.spreadsheet_id!r}, {self.sheet_name!r})"


def fetch_rows(source) -> list[dict[str, str]]:
    """Fetch header-keyed records from any source exposing ``fetch_rows()``.

    Raises FetchError on failure.
    """
    records = source.fetch_rows()
    logger.info("Fetched %d records from %r", len(records), source)
    return records
