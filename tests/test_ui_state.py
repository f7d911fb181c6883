import pytest

from uiproducer.core import Failure, MergePolicy, Success, UiState, as_result, result_data, success_or


def test_initial_load_only_while_first_fetch_runs():
    assert UiState(loading=True).initial_load
    assert not UiState(loading=True, data=[1]).initial_load
    assert not UiState(loading=True, exception=ValueError()).initial_load
    assert not UiState().initial_load


def test_success_replaces_data_and_clears_error():
    previous = UiState(data="old", loading=True, exception=ValueError("x"))
    merged = previous.copy_with_result(Success("new"))
    assert merged == UiState(data="new")


def test_failure_preserves_data_by_default():
    error = TimeoutError("slow")
    merged = UiState(data="old", loading=True).copy_with_result(Failure(error))
    assert merged == UiState(data="old", exception=error)


def test_failure_clears_data_under_clear_policy():
    error = TimeoutError("slow")
    merged = UiState(data="old", loading=True).copy_with_result(Failure(error), MergePolicy.CLEAR_DATA)
    assert merged == UiState(exception=error)


def test_copy_with_result_rejects_plain_values():
    with pytest.raises(TypeError):
        UiState().copy_with_result("raw")  # type: ignore[arg-type]


def test_result_helpers():
    error = KeyError("missing")
    assert success_or(Success(3), 0) == 3
    assert success_or(Failure(error), 0) == 0
    assert result_data(Success("x")) == "x"
    assert result_data(Failure(error)) is None
    assert as_result(5) == Success(5)
    assert as_result(Failure(error)) == Failure(error)


@pytest.mark.parametrize("name, expected", [
    ("preserve", MergePolicy.PRESERVE_DATA),
    (" CLEAR ", MergePolicy.CLEAR_DATA),
])
def test_merge_policy_from_name(name, expected):
    assert MergePolicy.from_name(name) is expected


def test_merge_policy_from_unknown_name():
    with pytest.raises(ValueError, match="preserve, clear"):
        MergePolicy.from_name("keep")
