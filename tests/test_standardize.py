import numpy as np
import pytest

from nbatiers.cluster import (
    CLUSTER_COLUMNS,
    DegenerateColumnError,
    InsufficientDataError,
    clustering_matrix,
    standardize,
    standardize_records,
)

from tests.factories import league_records


def _table(rows: int = 30) -> tuple[list[str], np.ndarray]:
    rng = np.random.default_rng(7)
    values = rng.normal(loc=50.0, scale=12.0, size=(rows, len(CLUSTER_COLUMNS)))
    return [f"player {i}" for i in range(rows)], values


def test_standardize_centres_and_scales_each_column():
    names, values = _table()
    result = standardize(names, values)

    assert np.allclose(result.values.mean(axis=0), 0.0, atol=1e-12)
    assert np.allclose(result.values.std(axis=0, ddof=1), 1.0)
    assert result.names == tuple(names)


def test_inverse_transform_restores_raw_values():
    names, values = _table()
    result = standardize(names, values)

    assert np.allclose(result.inverse_transform(), values)


def test_standardize_needs_two_rows():
    names, values = _table(rows=1)
    with pytest.raises(InsufficientDataError):
        standardize(names, values)


def test_zero_variance_column_is_reported_by_name():
    names, values = _table()
    values[:, CLUSTER_COLUMNS.index("blocks")] = 3.0

    with pytest.raises(DegenerateColumnError) as excinfo:
        standardize(names, values)
    assert excinfo.value.column == "blocks"


@pytest.mark.parametrize("constant", [0.1, 0.45, 0.333, 0.7])
def test_constant_float_column_is_degenerate(constant: float):
    names, values = _table()
    values[:, CLUSTER_COLUMNS.index("fg_pct")] = constant

    with pytest.raises(DegenerateColumnError) as excinfo:
        standardize(names, values)
    assert excinfo.value.column == "fg_pct"


def test_standardization_compares_by_identity():
    names, values = _table()
    result = standardize(names, values)

    assert result == result
    assert result != standardize(names, values)
    assert isinstance(hash(result), int)


def test_clustering_matrix_follows_column_order():
    records = league_records()
    names, matrix = clustering_matrix(records)

    assert matrix.shape == (len(records), 9)
    assert names[0] == records[0].name
    assert matrix[0, CLUSTER_COLUMNS.index("points")] == records[0].points
    assert matrix[0, CLUSTER_COLUMNS.index("fg_pct")] == pytest.approx(records[0].fg_pct)


def test_standardize_records_keeps_names_as_row_identity():
    records = league_records()
    result = standardize_records(records)

    assert result.names == tuple(record.name for record in records)
    assert result.columns == CLUSTER_COLUMNS
