"""Item Schemas: create/update validation and partial-update change sets."""

import pytest
from pydantic import ValidationError

from app.schemas.item import ItemCreate, ItemUpdate


def test_create_defaults_completed_false():
    assert ItemCreate(description="x").completed is False


def test_create_rejects_overlong_description():
    with pytest.raises(ValidationError):
        ItemCreate(description="x" * 256)


def test_update_changes_only_sent_fields():
    assert ItemUpdate(completed=True).changes() == {"completed": True}
    assert ItemUpdate().changes() == {}


def test_update_strips_description():
    assert ItemUpdate(description="  tea ").changes() == {"description": "tea"}


@pytest.mark.parametrize("field", ["description", "completed"])
def test_update_rejects_explicit_null(field):
    with pytest.raises(ValidationError):
        ItemUpdate.model_validate({field: None})


def test_length_is_checked_after_stripping():
    padded = f"  {'x' * 255}  "
    assert ItemCreate(description=padded).description == "x" * 255
    assert ItemUpdate(description=padded).changes() == {"description": "x" * 255}


@pytest.mark.parametrize("description", ["", "   "])
def test_blank_description_is_rejected(description):
    with pytest.raises(ValidationError):
        ItemCreate(description=description)
    with pytest.raises(ValidationError):
        ItemUpdate(description=description)
