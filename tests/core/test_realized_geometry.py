from __future__ import annotations

import numpy as np
import pytest

from radial_branch.core.realized_geometry import (
    RealizedGeometry,
    empty_geometry,
    geometry_from_polylines,
)


def test_constructor_normalizes_dtypes_and_freezes_arrays() -> None:
    g = RealizedGeometry(
        coords=np.asarray([[0, 0], [1, 1]], dtype=np.int64),
        offsets=np.asarray([0, 2], dtype=np.int64),
    )
    assert g.coords.dtype == np.float64
    assert g.offsets.dtype == np.int32
    assert not g.coords.flags.writeable
    assert not g.offsets.flags.writeable
    assert g.n_lines == 1


@pytest.mark.parametrize(
    ("coords", "offsets"),
    [
        (np.zeros((2, 3)), np.asarray([0, 2])),
        (np.zeros((2, 2)), np.asarray([], dtype=np.int32)),
        (np.zeros((2, 2)), np.asarray([1, 2])),
        (np.zeros((2, 2)), np.asarray([0, 3])),
        (np.zeros((3, 2)), np.asarray([0, 2, 1, 3])),
    ],
)
def test_constructor_rejects_inconsistent_arrays(coords, offsets) -> None:
    with pytest.raises(ValueError):
        RealizedGeometry(coords=coords, offsets=offsets)


def test_geometry_from_polylines_and_line_access() -> None:
    g = geometry_from_polylines(
        [
            np.asarray([[0.0, 0.0], [1.0, 0.0], [1.0, 1.0]]),
            np.asarray([[5.0, 5.0], [6.0, 6.0]]),
        ]
    )
    assert g.offsets.tolist() == [0, 3, 5]
    np.testing.assert_array_equal(g.line(1), [[5.0, 5.0], [6.0, 6.0]])
    with pytest.raises(IndexError):
        g.line(2)


def test_empty_inputs_give_empty_geometry() -> None:
    for g in (geometry_from_polylines([]), empty_geometry()):
        assert g.coords.shape == (0, 2)
        assert g.n_lines == 0
