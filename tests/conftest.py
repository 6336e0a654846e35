"""Shared fixtures for the BookGX pipeline tests."""

from unittest import mock

import pytest
import requests

from bookgx_dashboard.simulator import generate_sample_bookings


def make_response(text: str = "", status: int = 200, json_data=None) -> mock.Mock:
    """A requests.Response stand-in with the attributes the loaders touch."""
    resp = mock.Mock(spec=requests.Response)
    resp.text = text
    resp.status_code = status
    resp.ok = status < 400
    if status >= 400:
        resp.raise_for_status.side_effect = requests.HTTPError(f"{status} Error")
    else:
        resp.raise_for_status.return_value = None
    if json_data is None:
        resp.json.side_effect = ValueError("No JSON object could be decoded")
    else:
        resp.json.return_value = json_data
    return resp


@pytest.fixture
def fake_session():
    """A requests.Session whose get() is a Mock."""
    return mock.Mock(spec=requests.Session)


@pytest.fixture
def booking_records():
    return [
        {
            "Booking Date": "3/5/2025",
            "Location": "Riyadh",
            "Client Name": "Client A",
            "Booking Status": "Completed",
            "Total Book": "1,000",
            "Total Paid": "1,000",
            "Total Book Plus": "150",
            "Manager Rating": "5",
            "Client Review": "Great",
            "How did you know us ?": "Instagram",
            "Nature Booking": "New",
            "Cash": "1,000",
        },
        {
            "Booking Date": "3/20/2025",
            "Location": "Jeddah",
            "Client Name": "Client B",
            "Booking Status": "Confirmed",
            "Total Book": "500",
            "Total Paid": "150",
            "How did you know us ?": "Google",
            "Nature Booking": "Returning",
            "Mada": "150",
        },
        {
            "Booking Date": "4/2/2025",
            "Location": "Riyadh",
            "Client Name": "Client A",
            "Booking Status": "Canceled",
            "Total Book": "200",
            "Total Paid": "0",
            "How did you know us ?": "Instagram",
            "Nature Booking": "Returning",
        },
        {
            "Booking Date": "",
            "Location": "",
            "Client Name": "",
            "Booking Status": "Completed",
            "Total Book": "'300'",
            "Total Paid": "300",
            "Rating": "4",
            "How did you know us ?": "",
            "Nature Booking": "New",
            "Tabby": "300",
        },
    ]


@pytest.fixture(scope="session")
def sample_records():
    return generate_sample_bookings()


@pytest.fixture
def respond():
    return make_response
