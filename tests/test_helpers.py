import pytest
import numpy as np
from pegrid.utils.helpers import update_dict_recursively, ensure_directory, validate_array_shape

@pytest.mark.parametrize("base, update, expected", [
    ({'a': 1}, {'b': 2}, {'a': 1, 'b': 2}),
    ({'a': {'x': 1, 'y': 2}}, {'a': {'y': 3}}, {'a': {'x': 1, 'y': 3}}),
    ({'a': {'x': 1}}, {'a': 5}, {'a': 5}),                 # scalar replaces a section
    ({'a': 5}, {'a': {'x': 1}}, {'a': {'x': 1}}),          # section replaces a scalar
    ({'a': {'b': {'c': 1, 'd': 2}}}, {'a': {'b': {'d': 4}}}, {'a': {'b': {'c': 1, 'd': 4}}}),
])
def test_update_dict_recursively(base, update, expected):
    result = update_dict_recursively(base, update)
    assert result is base
    assert result == expected

def test_ensure_directory(tmp_path):
    target = tmp_path / "a" / "b"
    path = ensure_directory(str(target))
    assert path == target
    assert target.is_dir()
    # existing directories are left alone
    assert ensure_directory(target) == target

def test_validate_array_shape():
    validate_array_shape(np.zeros((3, 3)), (3, 3), "Lattice transform")
    with pytest.raises(ValueError, match=r"Lattice transform has shape \(2, 3\), expected \(3, 3\)"):
        validate_array_shape(np.zeros((2, 3)), (3, 3), "Lattice transform")
