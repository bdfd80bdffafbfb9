from __future__ import annotations

import pytest
from starlette.datastructures import Headers

from contactmerge.adapters.processing import HeaderProcessingChecker, StaticProcessingChecker
from contactmerge.domain.ports import ProcessingChecker


def test_static_checker() -> None:
    assert StaticProcessingChecker().can_process_contact()
    assert not StaticProcessingChecker(enabled=False).can_process_contact()
    assert isinstance(StaticProcessingChecker(), ProcessingChecker)


@pytest.mark.parametrize(
    ("headers", "expected"),
    [
        ({}, True),
        ({"DNT": "1"}, False),
        ({"dnt": " 1 "}, False),
        ({"DNT": "0"}, True),
        ({"Sec-GPC": "1"}, False),
    ],
)
def test_header_checker_honors_opt_out(headers: dict[str, str], expected: bool) -> None:
    checker = HeaderProcessingChecker(Headers(headers))

    assert checker.can_process_contact() is expected


def test_header_checker_can_ignore_opt_out() -> None:
    checker = HeaderProcessingChecker(Headers({"DNT": "1"}), honor_do_not_track=False)

    assert checker.can_process_contact()


def test_header_checker_respects_disabled_tracking() -> None:
    checker = HeaderProcessingChecker(Headers({}), tracking_enabled=False)

    assert not checker.can_process_contact()
