import numpy as np
import pytest

from lattesim.field import Field, FieldFormat, SwapField
from lattesim.flow import FlowUtil


def test_format_channels():
    assert FieldFormat.R32F.channels == 1
    assert FieldFormat.RG32F.channels == 2
    assert FieldFormat.RGBA32F.channels == 4


def test_allocate_shape_and_zero():
    field = Field()
    field.allocate(8, 4, FieldFormat.RG32F)
    assert field.allocated
    assert field.shape == (4, 8, 2)
    assert field.data.dtype == np.float32
    assert not field.data.any()


@pytest.mark.parametrize("width,height", [(0, 8), (8, 0), (-1, 4)])
def test_allocate_rejects_non_positive_size(width, height):
    with pytest.raises(ValueError):
        Field().allocate(width, height, FieldFormat.R32F)


def test_clear_single_and_per_channel():
    field = Field()
    field.allocate(4, 4, FieldFormat.RGBA32F)
    field.clear(0.5)
    assert np.all(field.data == 0.5)
    field.clear(0.1, 0.2, 0.3, 0.4)
    np.testing.assert_allclose(field.data[2, 3], [0.1, 0.2, 0.3, 0.4], rtol=1e-6)


def test_view_is_read_only():
    field = Field()
    field.allocate(4, 4, FieldFormat.R32F)
    view = field.view()
    with pytest.raises(ValueError):
        view[0, 0, 0] = 1.0
    field.data[0, 0, 0] = 2.0
    assert view[0, 0, 0] == 2.0


def test_swap_exchanges_roles_without_copying():
    pair = SwapField()
    pair.allocate(4, 4, FieldFormat.RG32F)
    read_data = pair.read.data
    write_data = pair.write.data
    assert read_data is not write_data

    pair.swap()
    assert pair.read.data is write_data
    assert pair.write.data is read_data

    pair.swap()
    assert pair.read.data is read_data


def test_deallocate():
    pair = SwapField()
    pair.allocate(4, 4, FieldFormat.R32F)
    pair.deallocate()
    assert not pair.allocated
    assert not pair.read.allocated


def test_flow_util_copy_shape_mismatch():
    a, b = Field(), Field()
    a.allocate(4, 4, FieldFormat.R32F)
    b.allocate(4, 4, FieldFormat.RG32F)
    with pytest.raises(ValueError):
        FlowUtil.copy(a, b)


def test_flow_util_add_and_clamp():
    pair = SwapField()
    pair.allocate(4, 4, FieldFormat.R32F)
    FlowUtil.add(pair, np.full((4, 4, 1), 3.0, dtype=np.float32), 0.5)
    assert np.allclose(pair.read.data, 1.5)
    FlowUtil.clamp(pair, 0.0, 1.0)
    assert np.allclose(pair.read.data, 1.0)


def test_flow_util_neighbours_clamp_to_edge():
    data = np.arange(9, dtype=np.float32).reshape(3, 3, 1)
    left, right, down, up = FlowUtil.neighbours(data)
    # column 0 has no left neighbour, reads itself
    assert left[1, 0, 0] == data[1, 0, 0]
    assert right[1, 0, 0] == data[1, 1, 0]
    assert down[0, 1, 0] == data[0, 1, 0]
    assert up[0, 1, 0] == data[1, 1, 0]
