"""
Pytest configuration and fixtures for consent document tests
"""

import pytest

from consent_pdf.measure import FontSet, TextMeasurer, load_fonts
from consent_pdf.models import ConsentRecord

from tests.factories import make_payload


@pytest.fixture(scope="session")
def font_set() -> FontSet:
    return load_fonts()


@pytest.fixture
def measurer(font_set: FontSet) -> TextMeasurer:
    return TextMeasurer(font_set)


@pytest.fixture
def adult_record() -> ConsentRecord:
    return ConsentRecord.model_validate(make_payload(age=34))


@pytest.fixture
def minor_record() -> ConsentRecord:
    return ConsentRecord.model_validate(make_payload(age=15))
