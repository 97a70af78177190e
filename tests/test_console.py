import numpy as np
import pytest

from engine.console import BLACK, WHITE, BackgroundFlag, Console, blit


def test_new_console_is_blank():
    con = Console(4, 3)
    assert con.ch.shape == (3, 4)
    assert con.get_char(3, 2) == " "
    assert (con.fg == WHITE).all()
    assert (con.bg == BLACK).all()


def test_invalid_dimensions():
    with pytest.raises(ValueError):
        Console(0, 3)


def test_put_char_uses_default_foreground():
    con = Console(4, 3)
    con.set_default_foreground((255, 255, 0))
    con.put_char(1, 2, "@")
    assert con.get_char(1, 2) == "@"
    assert tuple(con.fg[2, 1]) == (255, 255, 0)
    assert tuple(con.bg[2, 1]) == BLACK


def test_put_char_background_flag():
    con = Console(4, 3)
    con.default_bg = (10, 20, 30)
    con.put_char(0, 0, "a", BackgroundFlag.SET)
    con.put_char(1, 0, "b", BackgroundFlag.NONE)
    assert tuple(con.bg[0, 0]) == (10, 20, 30)
    assert tuple(con.bg[0, 1]) == BLACK


def test_put_char_outside_is_ignored():
    con = Console(4, 3)
    con.put_char(4, 0, "@")
    con.put_char(-1, 0, "@")
    assert (con.ch == ord(" ")).all()


def test_set_char_background():
    con = Console(4, 3)
    con.set_char_background(2, 1, (1, 2, 3))
    con.set_char_background(3, 1, (1, 2, 3), BackgroundFlag.NONE)
    assert tuple(con.bg[1, 2]) == (1, 2, 3)
    assert tuple(con.bg[1, 3]) == BLACK


def test_fill_background_with_smaller_mask():
    con = Console(4, 3)
    mask = np.array([[True, False], [False, True]])
    con.fill_background(mask, (9, 9, 9))
    assert tuple(con.bg[0, 0]) == (9, 9, 9)
    assert tuple(con.bg[1, 1]) == (9, 9, 9)
    assert tuple(con.bg[0, 1]) == BLACK
    assert tuple(con.bg[2, 3]) == BLACK


def test_clear_resets_cells():
    con = Console(2, 2)
    con.put_char(0, 0, "x")
    con.set_char_background(0, 0, (5, 5, 5))
    con.clear()
    assert con.get_char(0, 0) == " "
    assert tuple(con.bg[0, 0]) == BLACK


def test_blit_copies_region():
    src = Console(3, 2)
    src.put_char(2, 1, "@")
    src.set_char_background(2, 1, (7, 8, 9))
    dest = Console(10, 10)
    blit(src, (0, 0), (3, 2), dest, (4, 5))
    assert dest.get_char(6, 6) == "@"
    assert tuple(dest.bg[6, 6]) == (7, 8, 9)
    assert dest.get_char(2, 1) == " "


def test_blit_zero_size_means_whole_source():
    src = Console(3, 2)
    src.put_char(2, 1, "#")
    dest = Console(5, 5)
    blit(src, (0, 0), (0, 0), dest, (0, 0))
    assert dest.get_char(2, 1) == "#"


def test_blit_clips_to_destination():
    src = Console(4, 4)
    src.ch.fill(ord("x"))
    dest = Console(3, 3)
    blit(src, (0, 0), (4, 4), dest, (1, 1))
    assert (dest.ch[1:, 1:] == ord("x")).all()
    assert dest.get_char(0, 0) == " "


def test_blit_background_alpha_blends():
    src = Console(1, 1)
    src.set_char_background(0, 0, (200, 100, 0))
    dest = Console(1, 1)
    blit(src, (0, 0), (1, 1), dest, (0, 0), fg_alpha=0.0, bg_alpha=0.5)
    assert tuple(dest.bg[0, 0]) == (100, 50, 0)
