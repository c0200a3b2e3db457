from __future__ import annotations

from literalscan.text_utils import BlockCommentStripper, strip_comments


def test_line_comment_removed_to_end_of_line() -> None:
    assert strip_comments("// proc sql; run;") == ""
    assert strip_comments("x := 1 // data step\n") == "x := 1 \n"


def test_inline_block_comment_removed() -> None:
    assert strip_comments("a /* proc */ b\n") == "a  b\n"
    assert strip_comments("/* one */ x /* two */ y") == " x  y"


def test_block_comment_is_not_tracked_across_lines() -> None:
    assert strip_comments("/* start\n") == "/* start\n"
    assert strip_comments("proc sql;\n") == "proc sql;\n"


def test_comment_markers_inside_strings_are_still_stripped() -> None:
    assert strip_comments('url := "http://host/data x"\n') == 'url := "http:\n'


def test_block_stripper_agrees_with_regex_on_single_lines() -> None:
    lines = [
        "plain data line\n",
        "a /* x */ b // c\n",
        "//* odd\n",
        "x = 1; proc options;\r\n",
        "/* a */ /* b */ tail",
    ]
    stripper = BlockCommentStripper()
    for line in lines:
        assert stripper.strip(line) == strip_comments(line)
        assert stripper.in_block is False


def test_block_stripper_carries_open_comment_across_lines() -> None:
    stripper = BlockCommentStripper()

    assert stripper.strip("keep /* start\n") == "keep "
    assert stripper.in_block is True
    assert stripper.strip("proc sql;\n") == ""
    assert stripper.strip("end */ data x\n") == " data x\n"
    assert stripper.in_block is False


def test_block_stripper_ignores_line_marker_inside_block() -> None:
    stripper = BlockCommentStripper()
    assert stripper.strip("/* // still block\n") == ""
    assert stripper.strip("*/ after\n") == " after\n"
