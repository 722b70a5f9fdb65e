import pytest

from builders import button_document, button_library
from figma2code.figma_reader import parse
from figma2code.ids import SequentialIds


@pytest.fixture
def button_doc():
    return button_document()


@pytest.fixture
def button_lib():
    return button_library()


@pytest.fixture
def parsed_button(button_doc):
    return parse(button_doc)


@pytest.fixture
def ids():
    return SequentialIds()
