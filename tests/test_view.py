"""Tests for the pixel text view: parsing, rendering, cursor motion and paging."""

from iscroll import Boundary, DocumentLine, LineDocument, PixelTextView, Position
from iscroll.view import render_line

H = 16


def create_view(rows_per_line, num_rows=5, num_columns=20):
    lines = []
    for i, rows in enumerate(rows_per_line):
        if rows == 1:
            lines.append(DocumentLine(text=f"Line {i}"))
        else:
            lines.append(DocumentLine.image(rows, f"img{i}"))
    view = PixelTextView(LineDocument(lines), num_rows=num_rows, line_height=H)
    view.num_columns = num_columns
    return view


def test_from_text_parses_image_markers():
    doc = LineDocument.from_text("Intro\n[[image:12 A cat]]\n  [[image:3]]  \nOutro")

    assert len(doc) == 4
    assert doc[0] == DocumentLine(text="Intro")
    assert doc[1].is_image
    assert doc[1].rows == 12
    assert doc[1].text == "A cat"
    assert doc[2].is_image
    assert doc[2].rows == 3
    assert doc[2].text == ""
    assert doc[3].text == "Outro"


def test_from_text_keeps_malformed_markers_as_text():
    doc = LineDocument.from_text("[[image:x]]\n[[image:4")

    assert not doc[0].is_image
    assert doc[0].text == "[[image:x]]"
    assert not doc[1].is_image


def test_zero_row_image():
    doc = LineDocument.from_text("[[image:0]]")

    assert doc[0].is_image
    assert doc[0].rows == 0


def test_empty_document_has_one_line():
    doc = LineDocument.from_text("")

    assert len(doc) == 1
    assert doc.last_position == Position(0, 0)


def test_positions_order_by_line_then_column():
    assert Position(1, 5) < Position(2, 0)
    assert Position(2, 0) < Position(2, 1)
    assert Position(3, 0) == Position(3)


def test_render_line_text_is_truncated():
    assert render_line(DocumentLine(text="abcdef"), 4) == ["abcd"]


def test_render_line_image_box():
    rows = render_line(DocumentLine.image(4, "img1"), 20)

    assert len(rows) == 4
    assert rows[0] == "┌ img1 " + "─" * 12 + "┐"
    assert rows[1] == "│" + " " * 18 + "│"
    assert rows[3] == "└" + "─" * 18 + "┘"
    assert all(len(row) == 20 for row in rows)


def test_render_line_small_images():
    assert render_line(DocumentLine.image(1, "x"), 20) == ["[x]"]
    assert render_line(DocumentLine.image(1), 20) == ["[image]"]
    assert render_line(DocumentLine.image(0), 20) == []


def test_render_lays_out_rows():
    view = create_view([1, 4, 1])

    view.render()

    assert len(view.lines) == 5
    assert view.lines[0] == "Line 0"
    assert view.lines[1].startswith("┌ img1 ")
    assert view.lines[4].startswith("└")
    assert view.image_rows == [False, True, True, True, True]


def test_render_skips_rows_scrolled_above_viewport():
    view = create_view([1, 4, 1])
    view.window_start = Position(1, 0)
    view.vscroll = 2 * H

    view.render()

    assert view.lines[0].startswith("│")
    assert view.lines[1].startswith("└")
    assert view.lines[2] == "Line 2"
    assert view.lines[3:] == ["", ""]


def test_render_sets_visual_cursor():
    view = create_view([1] * 10)
    view.cursor = Position(3, 2)

    view.render()

    assert view.visual_cursor_y == 3
    assert view.visual_cursor_x == 2


def test_visual_cursor_on_image_is_first_visible_row():
    view = create_view([1, 8, 1])
    view.window_start = Position(1, 0)
    view.vscroll = 3 * H
    view.cursor = Position(1, 0)

    view.render()

    assert view.visual_cursor_y == 0
    assert view.visual_cursor_x == 0


def test_is_visible():
    view = create_view([1] * 20)
    view.window_start = Position(3, 0)

    assert not view.is_visible(Position(2, 0))
    assert view.is_visible(Position(3, 0))
    assert view.is_visible(Position(7, 0))
    assert not view.is_visible(Position(8, 0))


def test_partially_scrolled_image_is_visible():
    view = create_view([1, 5, 1])
    view.window_start = Position(1, 0)
    view.vscroll = 4 * H

    assert view.is_visible(Position(1, 0))
    assert view.line_extent(Position(1, 0)) == (-4 * H, H)
    assert view.line_extent(Position(2, 0)) == (H, 2 * H)


def test_advance():
    view = create_view([1] * 20)

    assert view.advance(Position(0, 0), -1) is None
    assert view.advance(Position(19, 0), 1) is None
    assert view.advance(Position(3, 5), 1) == Position(4, 0)
    assert view.advance(Position(3, 5), -2) == Position(1, 0)


def test_line_height_at():
    view = create_view([1, 12, 1])

    assert view.line_height_at(Position(0, 0)) == H
    assert view.line_height_at(Position(1, 0)) == 12 * H
    assert view.default_step_height() == H
    assert view.viewport_height() == 5 * H


def test_num_rows_follows_pixel_height():
    view = create_view([1] * 5, num_rows=5)

    view.num_rows = 10

    assert view.viewport_height() == 10 * H
    assert view.num_rows == 10


def test_move_cursor_down_scrolls_at_bottom():
    view = create_view([1] * 20)

    for _ in range(4):
        assert view.move_cursor_down() is None
    assert view.cursor == Position(4, 0)
    assert view.window_start == Position(0, 0)

    view.move_cursor_down()
    assert view.cursor == Position(5, 0)
    assert view.window_start == Position(1, 0)


def test_move_cursor_down_through_tall_image():
    view = create_view([1, 1, 1, 1, 1, 8, 1])
    view.cursor = Position(4, 0)

    view.move_cursor_down()
    assert view.cursor == Position(5, 0)
    assert view.window_start == Position(1, 0)

    # The cursor stays on the image while it scrolls past
    presses = 0
    while view.cursor.line_index == 5 and presses < 20:
        view.move_cursor_down()
        presses += 1

    assert view.cursor == Position(6, 0)
    assert view.window_start == Position(5, 0)
    assert view.vscroll == 4 * H


def test_move_cursor_up_lands_in_very_tall_image():
    view = create_view([1, 12, 1, 1, 1, 1, 1])
    view.window_start = Position(2, 0)
    view.cursor = Position(2, 0)

    view.move_cursor_up()
    assert view.cursor == Position(1, 0)
    assert view.window_start == Position(1, 0)
    assert view.vscroll == 11 * H

    view.move_cursor_up()
    assert view.cursor == Position(1, 0)
    assert view.vscroll == 10 * H


def test_move_cursor_at_document_bounds():
    view = create_view([1, 1, 1])

    assert view.move_cursor_up() == Boundary.BEGINNING_OF_DOCUMENT

    view.cursor = Position(2, 0)
    assert view.move_cursor_down() == Boundary.END_OF_DOCUMENT
    assert view.cursor == Position(2, 0)


def test_offscreen_cursor_snaps_to_window_start_first():
    view = create_view([1] * 20)
    view.window_start = Position(10, 0)
    view.cursor = Position(0, 0)

    view.move_cursor_down()

    assert view.cursor == Position(11, 0)


def test_desired_column_preserved_across_short_line():
    view = PixelTextView(LineDocument([
        DocumentLine(text="abcdef"),
        DocumentLine(text="ab"),
        DocumentLine(text="abcdef"),
    ]), num_rows=5, line_height=H)
    view.cursor = Position(0, 5)
    view.update_desired_x()

    view.move_cursor_down()
    assert view.cursor == Position(1, 2)

    view.move_cursor_down()
    assert view.cursor == Position(2, 5)


def test_horizontal_motion_stays_on_line():
    view = PixelTextView(LineDocument([DocumentLine(text="ab")]), num_rows=5, line_height=H)

    view.move_cursor_left()
    assert view.cursor == Position(0, 0)
    view.move_cursor_right()
    view.move_cursor_right()
    view.move_cursor_right()
    assert view.cursor == Position(0, 2)


def test_page_down_and_up_keep_context_lines():
    view = create_view([1] * 40, num_rows=10)

    assert view.scroll_page_down() is None
    assert view.window_start == Position(8, 0)

    view.scroll_page_up()
    assert view.window_start == Position(0, 0)


def test_page_up_at_top_reports_beginning():
    view = create_view([1] * 40, num_rows=10)

    assert view.scroll_page_up() == Boundary.BEGINNING_OF_DOCUMENT


def test_goto_end_bottom_aligns_last_line():
    view = create_view([1] * 20)

    view.goto_end()

    assert view.window_start == Position(15, 0)
    assert view.vscroll == 0
    assert view.cursor == Position(19, 0)


def test_goto_end_with_image_taller_than_viewport():
    view = create_view([1, 1, 8])

    view.goto_end()

    assert view.window_start == Position(2, 0)
    assert view.vscroll == 3 * H
    assert view.is_visible(view.cursor)


def test_goto_beginning_resets_everything():
    view = create_view([1, 8, 1])
    view.window_start = Position(1, 0)
    view.vscroll = 2 * H
    view.cursor = Position(2, 0)

    view.goto_beginning()

    assert view.window_start == Position(0, 0)
    assert view.vscroll == 0
    assert view.cursor == Position(0, 0)


def test_set_document_starts_at_top():
    view = create_view([1] * 20)
    view.window_start = Position(5, 0)

    view.set_document(LineDocument.from_text("one\ntwo"))

    assert len(view.document) == 2
    assert view.window_start == Position(0, 0)
