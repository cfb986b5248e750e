#  This file is part of covsearch.
#
#  SPDX-FileCopyrightText: 2026 covsearch Contributors
#
#  SPDX-License-Identifier: MIT
#
import logging

import pytest

from covsearch.ga.searchobserver import LogSearchObserver
from covsearch.ga.searchobserver import SearchProgress


def _progress(covered: int, uncovered: int) -> SearchProgress:
    return SearchProgress(
        iteration=4,
        archive_size=covered,
        current_objectives=uncovered,
        covered_objectives=covered,
        uncovered_objectives=uncovered,
        budget_progress=0.5,
    )


@pytest.mark.parametrize(
    "covered,uncovered,coverage",
    [
        pytest.param(0, 0, 1.0),
        pytest.param(0, 4, 0.0),
        pytest.param(1, 3, 0.25),
        pytest.param(2, 0, 1.0),
    ],
)
def test_coverage(covered, uncovered, coverage):
    assert _progress(covered, uncovered).coverage == coverage


def test_log_observer(caplog):
    observer = LogSearchObserver()
    with caplog.at_level(logging.DEBUG):
        observer.before_search_start(0)
        observer.before_first_search_iteration(_progress(0, 4))
        observer.after_search_iteration(_progress(1, 3))
        observer.after_search_finish(_progress(1, 3))
    assert "Initial Population, Coverage: 0.000000" in caplog.text
    assert "Iteration:       4, Coverage: 0.250000, Archive: 1" in caplog.text
    assert "Search finished after 4 iterations" in caplog.text
