"""Shared pytest fixtures and helpers.

Unit tests swap every Google Cloud client for a MagicMock through the
``client_factory`` keyword the snippets accept, so nothing leaves the
process. Tests marked ``system`` talk to the real services and only run
when GOOGLE_CLOUD_PROJECT is set.
"""

import io
import os
from unittest.mock import MagicMock

import pytest
from google.cloud import dlp_v2

PROJECT_ID = "test-project"
SYSTEM_PROJECT_ID = os.getenv("GOOGLE_CLOUD_PROJECT", "")


def pytest_collection_modifyitems(config, items):
    if SYSTEM_PROJECT_ID:
        return
    skip_system = pytest.mark.skip(reason="GOOGLE_CLOUD_PROJECT not set")
    for item in items:
        if "system" in item.keywords:
            item.add_marker(skip_system)


def inspect_response(*findings) -> dlp_v2.InspectContentResponse:
    """InspectContentResponse from ``(quote, info_type, likelihood_name)`` tuples."""
    return dlp_v2.InspectContentResponse(
        result=dlp_v2.InspectResult(
            findings=[
                dlp_v2.Finding(
                    quote=quote,
                    info_type=dlp_v2.InfoType(name=info_type),
                    likelihood=dlp_v2.Likelihood[likelihood],
                )
                for quote, info_type, likelihood in findings
            ]
        )
    )


def text_response(value: str) -> dlp_v2.DeidentifyContentResponse:
    return dlp_v2.DeidentifyContentResponse(item=dlp_v2.ContentItem(value=value))


def table_response(table: dlp_v2.Table) -> dlp_v2.DeidentifyContentResponse:
    return dlp_v2.DeidentifyContentResponse(item=dlp_v2.ContentItem(table=table))


def sent_request(method: MagicMock) -> dict:
    """The ``request`` mapping passed to a mocked client method."""
    return method.call_args.kwargs["request"]


@pytest.fixture
def out() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def fake_client() -> MagicMock:
    return MagicMock()


@pytest.fixture
def factory(fake_client: MagicMock) -> MagicMock:
    """Client factory returning ``fake_client``; assert on it to check a client was (not) built."""
    return MagicMock(return_value=fake_client)
