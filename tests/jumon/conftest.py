from __future__ import annotations

import pytest

from tests.utils import FakeContentSource


@pytest.fixture()
def fake_source() -> FakeContentSource:
    source = FakeContentSource()
    source.add_repo(
        "acme/tools",
        {"deploy.md": "# Deploy\n", "tools/test.md": "# Test\n"},
    )
    return source
