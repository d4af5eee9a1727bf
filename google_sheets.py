"""Google Sheets gateway — read/write/append/batch-update cell ranges.

Usage:
    from google_sheets import open_gateway

    gateway = open_gateway()                       # SPREADSHEET_ID from config
    rows = gateway.get_range("Results", "A2:F")
    gateway.update_range("Picks", "C5:C7", [["EDM"], ["CGY"], ["VAN"]])

Every call goes straight to the Sheets values API with valueInputOption=RAW,
so the grid written is exactly the grid read back.
"""
import requests
import gspread
from google.auth.exceptions import GoogleAuthError
from gspread.utils import absolute_range_name
from google.oauth2.service_account import Credentials

from config import (GOOGLE_CLIENT_EMAIL, GOOGLE_CREDENTIALS_FILE, GOOGLE_PRIVATE_KEY,
                    REQUEST_TIMEOUT, SPREADSHEET_ID)
from models import GatewayError


SCOPES = [
    "https://www.googleapis.com/auth/spreadsheets",
]

RAW = {"valueInputOption": "RAW"}

# google-auth raises its own errors when a token refresh fails mid-request
GATEWAY_ERRORS = (gspread.exceptions.GSpreadException, requests.RequestException, GoogleAuthError)


def _get_credentials():
    """Service-account credentials from env vars, else from the JSON key file."""
    if GOOGLE_CLIENT_EMAIL and GOOGLE_PRIVATE_KEY:
        info = {
            "type": "service_account",
            "client_email": GOOGLE_CLIENT_EMAIL,
            # .env files store the key on one line with literal \n
            "private_key": GOOGLE_PRIVATE_KEY.replace("\\n", "\n"),
            "token_uri": "https://oauth2.googleapis.com/token",
        }
        return Credentials.from_service_account_info(info, scopes=SCOPES)
    return Credentials.from_service_account_file(GOOGLE_CREDENTIALS_FILE, scopes=SCOPES)


def _get_client():
    """Authenticate and return a gspread client."""
    client = gspread.authorize(_get_credentials())
    client.set_timeout(REQUEST_TIMEOUT)
    return client


def open_gateway(spreadsheet_id=SPREADSHEET_ID):
    """Open the shared spreadsheet and wrap it in a SheetGateway."""
    try:
        spreadsheet = _get_client().open_by_key(spreadsheet_id)
    except GATEWAY_ERRORS + (OSError, ValueError) as e:
        raise GatewayError(f"could not open spreadsheet {spreadsheet_id}: {e}") from e
    return SheetGateway(spreadsheet)


class SheetGateway:
    """Thin contract over one spreadsheet's values API.

    Ranges are A1 strings without the sheet prefix ('A2:F', 'C5:C7');
    grids are lists of rows. Failures surface as GatewayError.
    """

    def __init__(self, spreadsheet):
        self.spreadsheet = spreadsheet

    def _call(self, what, fn, *args, **kwargs):
        try:
            return fn(*args, **kwargs)
        except GATEWAY_ERRORS as e:
            raise GatewayError(f"{what} failed: {e}") from e

    def get_range(self, sheet_name, rng):
        """Read a range. Missing rows/cells come back short, never padded."""
        name = absolute_range_name(sheet_name, rng)
        resp = self._call(f"get {name}", self.spreadsheet.values_get, name)
        return resp.get("values", [])

    def update_range(self, sheet_name, rng, grid):
        name = absolute_range_name(sheet_name, rng)
        return self._call(f"update {name}", self.spreadsheet.values_update,
                          name, params=RAW, body={"values": grid})

    def append_rows(self, sheet_name, rng, grid):
        name = absolute_range_name(sheet_name, rng)
        return self._call(f"append {name}", self.spreadsheet.values_append,
                          name, params=RAW, body={"values": grid})

    def batch_update(self, sheet_name, updates):
        """Write several (range, grid) pairs in one request."""
        if not updates:
            return None
        data = [
            {"range": absolute_range_name(sheet_name, rng), "values": grid}
            for rng, grid in updates
        ]
        return self._call(f"batch update {sheet_name}", self.spreadsheet.values_batch_update,
                          body={"valueInputOption": "RAW", "data": data})
