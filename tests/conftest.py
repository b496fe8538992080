# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at http://mozilla.org/MPL/2.0/.

"""Fixtures shared by every test module."""

import os
from logging import LogRecord
from typing import Callable

import pytest

# Settings are loaded lazily, so this has to happen before the first access.
os.environ.setdefault("FEEDICONS_ENV", "testing")

FilterCaplogFixture = Callable[[list[LogRecord], str], list[LogRecord]]


@pytest.fixture(scope="session", name="filter_caplog")
def fixture_filter_caplog() -> FilterCaplogFixture:
    """Return a function keeping only the captured records of one logger."""

    def filter_caplog(records: list[LogRecord], logger_name: str) -> list[LogRecord]:
        return [record for record in records if record.name == logger_name]

    return filter_caplog
