import pytest

from fracit import Result, Results


class TestResults:
    def test_starts_empty(self):
        results = Results(2, 3, 10)
        assert results.shape == (2, 3)
        assert results.capacity == 10
        assert len(results) == 6
        assert not results.complete

    def test_round_trips_a_record(self):
        results = Results(2, 3, 10)
        record = Result(z=1.5 - 2j, c=0.25j, iterations=7)
        results.set_result(1, 2, record)
        assert results.result(1, 2) == record
        assert results.written[1, 2]

    def test_complete_after_every_cell(self):
        results = Results(2, 2, 5)
        for row in range(2):
            for col in range(2):
                results.set_result(row, col, Result(z=0j, c=0j, iterations=row + col))
        assert results.complete
        assert [r.iterations for r in results] == [0, 1, 1, 2]

    @pytest.mark.parametrize("row,col", [(-1, 0), (2, 0), (0, 3)])
    def test_out_of_range(self, row, col):
        with pytest.raises(IndexError):
            Results(2, 3, 10).set_result(row, col, Result(z=0j, c=0j, iterations=0))

    def test_sealed_store_rejects_writes(self):
        results = Results(1, 1, 3)
        results.done()
        assert results.sealed
        with pytest.raises(RuntimeError):
            results.set_result(0, 0, Result(z=0j, c=0j, iterations=0))
        with pytest.raises(ValueError):
            results.iterations[0, 0] = 1
