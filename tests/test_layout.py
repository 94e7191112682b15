from coinmerge.components.grid_config import GridConfig
from coinmerge.ui.layout import BoardGeometry, cell_at_point, compute_board_geometry


def geometry():
    return BoardGeometry(rows=3, cols=4, square_size=64, gap=4, left=10, bottom=20)


def test_cell_at_point_maps_top_row_to_zero():
    geo = geometry()
    assert geo.top == 20 + 3 * 64 + 2 * 4
    assert cell_at_point(11, geo.top - 1, geo) == (0, 0)
    assert cell_at_point(10 + 68 * 3 + 5, 21, geo) == (2, 3)


def test_gap_and_outside_points_miss():
    geo = geometry()
    assert cell_at_point(10 + 64 + 2, geo.top - 10, geo) is None
    assert cell_at_point(5, 50, geo) is None
    assert cell_at_point(10 + geo.width + 1, 50, geo) is None
    assert cell_at_point(50, 19, geo) is None


def test_cell_center_round_trips():
    geo = geometry()
    for row in range(3):
        for col in range(4):
            assert cell_at_point(*geo.cell_center(row, col), geo) == (row, col)


def test_board_geometry_fits_window():
    config = GridConfig(rows=8, cols=8, square_size=64, gap=4)
    roomy = compute_board_geometry(1000, 1000, config)
    assert roomy.square_size == 64
    assert roomy.left == (1000 - roomy.width) / 2
    tight = compute_board_geometry(300, 400, config)
    assert tight.square_size < 64
    assert tight.width <= 300
    assert tight.left >= 0
