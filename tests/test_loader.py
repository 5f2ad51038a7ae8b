import pytest
import numpy as np
from pegrid.io.loader import FrameworkLoader

XYZ = """2
Lattice="10.0 0.0 0.0 0.0 10.0 0.0 0.0 0.0 12.0" Properties=species:S:1:pos:R:3 pbc="T T T"
C 1.3 1.7 2.4
O 6.2 5.9 13.2
"""

@pytest.fixture
def xyz_file(tmp_path):
    path = tmp_path / "toy_fw.xyz"
    path.write_text(XYZ)
    return path

def test_loader_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError, match="Structure file not found"):
        FrameworkLoader(tmp_path / "missing.cif")

def test_loader_name_defaults_to_stem(xyz_file):
    assert FrameworkLoader(xyz_file).name == "toy_fw"
    assert FrameworkLoader(xyz_file, name="IRMOF-1").name == "IRMOF-1"

def test_load_extended_xyz(xyz_file):
    pytest.importorskip("ovito")
    fw = FrameworkLoader(xyz_file).load()
    assert fw.name == "toy_fw"
    assert fw.atom_types == ("C", "O")
    np.testing.assert_allclose(fw.f_to_cartesian, np.diag([10.0, 10.0, 12.0]))
    # the second atom sits outside the cell along z and is wrapped back in
    np.testing.assert_allclose(fw.fractional_coords, [[0.13, 0.17, 0.2], [0.62, 0.59, 0.1]], atol=1e-6)
