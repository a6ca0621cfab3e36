"""Result Translation: FailureKind → TodoError → HTTP status."""

import pytest

from app.api.translate import to_http_error, unwrap
from app.core.errors import DatabaseError, ItemNotFoundError
from app.core.result import Err, FailureKind, Ok, StoreFailure, not_found


def test_unwrap_ok_returns_value():
    assert unwrap(Ok({"id": "1"})) == {"id": "1"}


def test_unwrap_not_found_raises_404():
    with pytest.raises(ItemNotFoundError) as exc_info:
        unwrap(not_found("update", "abc"))
    assert exc_info.value.http_status == 404
    assert exc_info.value.context.item_id == "abc"


@pytest.mark.parametrize("kind", [FailureKind.UNAVAILABLE, FailureKind.QUERY])
def test_store_failures_map_to_503(kind):
    error = to_http_error(StoreFailure(kind, "list", "boom"))
    assert isinstance(error, DatabaseError)
    assert error.http_status == 503


def test_every_kind_is_mapped():
    for kind in FailureKind:
        assert to_http_error(StoreFailure(kind, "get", item_id="x")).http_status in (404, 503)


def test_unwrap_rejects_non_results():
    with pytest.raises(TypeError):
        unwrap({"id": "1"})


def test_unwrap_err_instance():
    with pytest.raises(DatabaseError):
        unwrap(Err(StoreFailure(FailureKind.UNAVAILABLE, "add")))
