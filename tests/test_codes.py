import pytest

from geotype.taxonomy import codes


def test_pack_puts_first_segment_in_high_bits():
    code = codes.pack([4, 1])
    assert code == (((1 << 7) | 4) << 7) | 1
    assert codes.split_code(code) == [4, 1]
    assert codes.depth(code) == 2


def test_empty_code_has_no_segments():
    assert codes.depth(codes.EMPTY_CODE) == 0
    assert codes.split_code(codes.EMPTY_CODE) == []


def test_truncate_keeps_leading_segments():
    code = codes.pack([4, 1, 0])
    assert codes.truncate(code, 1) == codes.pack([4])
    assert codes.truncate(code, 2) == codes.pack([4, 1])
    assert codes.truncate(code, 3) == code
    assert codes.truncate(code, 5) == code


def test_codes_of_different_depth_differ():
    assert codes.pack([0]) != codes.pack([0, 0])
    assert codes.pack([1, 0]) != codes.pack([0, 1])


def test_sibling_index_must_fit_level_width():
    with pytest.raises(codes.CodeError):
        codes.push_value(codes.EMPTY_CODE, codes.MAX_SIBLING_INDEX + 1)
    with pytest.raises(codes.CodeError):
        codes.push_value(codes.EMPTY_CODE, -1)


def test_level_count_is_bounded():
    code = codes.pack([1] * codes.MAX_LEVELS)
    with pytest.raises(codes.CodeError):
        codes.push_value(code, 0)


def test_depth_rejects_invalid_code():
    with pytest.raises(codes.CodeError):
        codes.depth(0)
