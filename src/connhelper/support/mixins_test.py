import unittest

from hamcrest import assert_that, is_, equal_to, is_not

from connhelper.support.mixins import CommonEqualityMixin, StringerMixin


class Value(CommonEqualityMixin, StringerMixin):
    def __init__(self, a, b=None):
        self.a = a
        self.b = b


class Other(CommonEqualityMixin):
    def __init__(self, a, b=None):
        self.a = a
        self.b = b


class MixinsTest(unittest.TestCase):
    def test_equal_values(self):
        assert_that(Value(1, 'x'), is_(equal_to(Value(1, 'x'))))
        assert_that(Value(1, 'x') != Value(1, 'x'), is_(False))

    def test_unequal_values(self):
        assert_that(Value(1, 'x'), is_not(equal_to(Value(2, 'x'))))

    def test_different_types_are_not_equal(self):
        assert_that(Value(1) == Other(1), is_(False))

    def test_equal_values_hash_alike(self):
        assert_that(hash(Value(1, 'x')), is_(hash(Value(1, 'x'))))

    def test_str(self):
        assert_that(str(Value(1)), is_("Value{'a': '1', 'b': None}"))
        assert_that(repr(Value(1)), is_(str(Value(1))))


if __name__ == '__main__':  # pragma no cover
    unittest.main()
