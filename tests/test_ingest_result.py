"""
tests/test_ingest_result.py

Composition laws and invariants of IngestResult.
"""

from __future__ import annotations

import pytest

from app.domain.ingest_result import EMPTY_RESULT, IngestResult, concat_results

SAMPLES = [
    IngestResult(),
    IngestResult(total=3, success=3),
    IngestResult(total=5, success=2),
    IngestResult(total=7, success=0),
]


class TestIngestResultContract:
    def test_is_frozen(self) -> None:
        result = IngestResult(total=2, success=1)
        with pytest.raises((AttributeError, TypeError)):
            result.total = 3  # type: ignore[misc]

    def test_default_is_zero_pair(self) -> None:
        assert IngestResult() == IngestResult(total=0, success=0)
        assert EMPTY_RESULT == IngestResult()

    @pytest.mark.parametrize("total, success", [(-1, 0), (2, 3), (2, -1)])
    def test_rejects_broken_invariant(self, total: int, success: int) -> None:
        with pytest.raises(ValueError):
            IngestResult(total=total, success=success)

    def test_failed_is_derived(self) -> None:
        assert IngestResult(total=5, success=2).failed == 3

    def test_as_dict(self) -> None:
        assert IngestResult(total=4, success=1).as_dict() == {"total": 4, "success": 1, "failed": 3}


class TestComposition:
    def test_sums_fields_independently(self) -> None:
        assert IngestResult(total=2, success=1) + IngestResult(total=3, success=3) == IngestResult(
            total=5, success=4
        )

    @pytest.mark.parametrize("a", SAMPLES)
    @pytest.mark.parametrize("b", SAMPLES)
    @pytest.mark.parametrize("c", SAMPLES)
    def test_associative(self, a: IngestResult, b: IngestResult, c: IngestResult) -> None:
        assert (a + b) + c == a + (b + c)

    @pytest.mark.parametrize("a", SAMPLES)
    def test_identity(self, a: IngestResult) -> None:
        assert a + IngestResult() == a
        assert IngestResult() + a == a

    def test_commutative(self) -> None:
        a = IngestResult(total=4, success=1)
        b = IngestResult(total=2, success=2)
        assert a + b == b + a

    def test_concat_of_nothing_is_identity(self) -> None:
        assert concat_results() == IngestResult()

    def test_concat_many(self) -> None:
        assert concat_results(*SAMPLES) == IngestResult(total=15, success=5)

    def test_adding_foreign_type_is_unsupported(self) -> None:
        with pytest.raises(TypeError):
            IngestResult() + 1  # type: ignore[operator]
