"""Integration test fixtures — A live Algolia application.

Expects credentials in the environment:
    ORDERINDEX_IT_APPLICATION_ID, ORDERINDEX_IT_API_KEY

Each session writes to a throwaway index and deletes its records on exit.
"""

from __future__ import annotations

import os
import uuid
from collections.abc import Iterator

import pytest

from orderindex.adapters.algolia.adapter import AlgoliaIndexAdapter


@pytest.fixture(scope="session")
def algolia_credentials() -> tuple[str, str]:
    application_id = os.environ.get("ORDERINDEX_IT_APPLICATION_ID", "")
    api_key = os.environ.get("ORDERINDEX_IT_API_KEY", "")
    if not application_id or not api_key:
        pytest.skip("Algolia credentials not configured (ORDERINDEX_IT_APPLICATION_ID / ORDERINDEX_IT_API_KEY)")
    return application_id, api_key


@pytest.fixture(scope="session")
def live_adapter(algolia_credentials: tuple[str, str]) -> Iterator[AlgoliaIndexAdapter]:
    application_id, api_key = algolia_credentials
    adapter = AlgoliaIndexAdapter(
        application_id=application_id,
        api_key=api_key,
        index_name=f"orderindex_it_{uuid.uuid4().hex[:8]}",
        wait_poll_interval=0.5,
        wait_timeout=60.0,
    )
    adapter.initialize()
    yield adapter
    adapter.wait_task(adapter.clear_objects())
    adapter.close()
