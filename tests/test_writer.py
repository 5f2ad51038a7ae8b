import pytest
import numpy as np
import yaml
from pegrid.core.framework import cell_matrix
from pegrid.io.writer import GridWriter, KELVIN_TO_KJ_PER_MOL, write_cube, read_cube, read_cube_header

@pytest.fixture
def cubic_mtrx():
    return np.eye(3) * 10.0

def body_lines(path):
    return path.read_text().split("\n")[6:]

def test_header_layout(tmp_path, cubic_mtrx):
    path = write_cube(tmp_path / "grid.cube", cubic_mtrx, (3, 3, 3), np.zeros(27))
    lines = path.read_text().split("\n")
    assert lines[0] == "This is a grid file generated by pegrid"
    assert lines[1] == "Loop order: x, y, z"
    assert lines[2] == "0 0.000000 0.000000 0.000000"
    assert lines[3] == "3 5.000000 0.000000 0.000000"
    assert lines[4] == "3 0.000000 5.000000 0.000000"
    assert lines[5] == "3 0.000000 0.000000 5.000000"

def test_custom_comments(tmp_path, cubic_mtrx):
    path = write_cube(tmp_path / "grid.cube", cubic_mtrx, (2, 2, 2), np.zeros(8), comments=["IRMOF-1 Xe", "UFF"])
    header = read_cube_header(path)
    assert header.comments == ("IRMOF-1 Xe", "UFF")
    with pytest.raises(ValueError, match="two comment lines"):
        write_cube(tmp_path / "bad.cube", cubic_mtrx, (2, 2, 2), np.zeros(8), comments=["only one"])

def test_energy_conversion_and_format(tmp_path, cubic_mtrx):
    path = write_cube(tmp_path / "grid.cube", cubic_mtrx, (2, 2, 2), [1000.0] + [0.0] * 7)
    first = body_lines(path)[0]
    assert first == "8.314000e+00 0.000000e+00 "

def test_rows_shorter_than_six_values(tmp_path, cubic_mtrx):
    path = write_cube(tmp_path / "grid.cube", cubic_mtrx, (2, 3, 4), np.arange(24.0))
    lines = body_lines(path)
    # one line per z-run, then the trailing empty string after the last newline
    assert len(lines) == 2 * 3 + 1 and lines[-1] == ""
    assert all(len(line.split()) == 4 for line in lines[:-1])

def test_rows_wrap_every_six_values(tmp_path, cubic_mtrx):
    path = write_cube(tmp_path / "grid.cube", cubic_mtrx, (2, 2, 8), np.arange(32.0))
    lines = body_lines(path)
    assert [len(line.split()) for line in lines[:-1]] == [6, 2] * 4

def test_row_break_after_exact_multiple_of_six(tmp_path, cubic_mtrx):
    path = write_cube(tmp_path / "grid.cube", cubic_mtrx, (2, 2, 6), np.arange(24.0))
    lines = body_lines(path)
    # the 6-column wrap and the row break both end a line
    assert [len(line.split()) for line in lines[:-1]] == [6, 0] * 4

def test_round_trip_header_and_values(tmp_path):
    mtrx = np.array([[12.0, 3.0, 1.5], [0.0, 9.0, 2.25], [0.0, 0.0, 7.5]])
    n_points = (5, 4, 7)
    energies = np.linspace(-500.0, 250.0, int(np.prod(n_points)))
    path = write_cube(tmp_path / "grid.cube", mtrx, n_points, iter(energies.tolist()))

    header, values = read_cube(path)
    assert header.n_points == n_points
    assert header.n_atoms == 0
    np.testing.assert_array_equal(header.origin, [0.0, 0.0, 0.0])
    expected_voxels = np.array([mtrx[:, 0] / 4, mtrx[:, 1] / 3, mtrx[:, 2] / 6])
    np.testing.assert_array_equal(header.voxel_vectors, expected_voxels)
    np.testing.assert_allclose(values, (energies * KELVIN_TO_KJ_PER_MOL).reshape(n_points), rtol=1e-6)

def test_round_trip_triclinic_voxels(tmp_path):
    mtrx = cell_matrix(10.0, 11.0, 12.0, 80.0, 95.0, 105.0)
    path = write_cube(tmp_path / "grid.cube", mtrx, (3, 3, 3), np.zeros(27))
    header = read_cube_header(path)
    assert header.n_points == (3, 3, 3)
    np.testing.assert_allclose(header.voxel_vectors, (mtrx / 2.0).T, atol=1e-6)

def _failing_stream(n_ok):
    for i in range(n_ok):
        yield float(i)
    raise RuntimeError("worker died")

def test_failed_stream_leaves_no_file(tmp_path, cubic_mtrx):
    target = tmp_path / "grid.cube"
    with pytest.raises(RuntimeError, match="worker died"):
        write_cube(target, cubic_mtrx, (3, 3, 3), _failing_stream(10))
    assert not target.exists()
    assert list(tmp_path.iterdir()) == []

def test_failed_stream_keeps_previous_file(tmp_path, cubic_mtrx):
    target = write_cube(tmp_path / "grid.cube", cubic_mtrx, (2, 2, 2), np.zeros(8))
    before = target.read_text()
    with pytest.raises(RuntimeError):
        write_cube(target, cubic_mtrx, (2, 2, 2), _failing_stream(3))
    assert target.read_text() == before

@pytest.mark.parametrize("n_values, message", [(26, "ended after 26"), (28, "more than 27")])
def test_wrong_stream_length(tmp_path, cubic_mtrx, n_values, message):
    target = tmp_path / "grid.cube"
    with pytest.raises(ValueError, match=message):
        write_cube(target, cubic_mtrx, (3, 3, 3), np.zeros(n_values))
    assert not target.exists()

def test_read_cube_size_mismatch(tmp_path, cubic_mtrx):
    path = write_cube(tmp_path / "grid.cube", cubic_mtrx, (2, 2, 2), np.zeros(8))
    path.write_text(path.read_text() + "1.0e+00\n")
    with pytest.raises(ValueError, match="holds 9 values"):
        read_cube(path)

def test_grid_writer_paths(tmp_path, cubic_mtrx):
    writer = GridWriter(tmp_path / "out")
    path = writer.save_grid(cubic_mtrx, (2, 2, 2), np.zeros(8), structure_name="IRMOF-1",
                            adsorbate="Xe", forcefield_name="UFF")
    assert path == tmp_path / "out" / "UFF" / "IRMOF-1_Xe.cube"
    assert path.exists()

    custom = writer.save_grid(cubic_mtrx, (2, 2, 2), np.zeros(8), filename="custom/grid.cube")
    assert custom == tmp_path / "out" / "custom" / "grid.cube"
    assert read_cube_header(custom).n_points == (2, 2, 2)

def test_grid_writer_save_config(tmp_path):
    writer = GridWriter(tmp_path)
    path = writer.save_config({'grid': {'spacing': 0.5}})
    with open(path) as f:
        assert yaml.safe_load(f) == {'grid': {'spacing': 0.5}}
