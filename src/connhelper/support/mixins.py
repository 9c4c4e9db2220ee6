def quote(val):
    return "'" + str(val) + "'" if val is not None else "None"


class StringerMixin:
    """ renders the class name and the instance attributes in key order. """

    def __str__(self):
        return type(self).__name__ + self._sorted_items_string()

    def __repr__(self):
        return str(self)

    def _sorted_items_string(self):
        return "{" + ", ".join(["'" + str(key) + "': " + quote(val)
                                for key, val in sorted(self.__dict__.items())]) + "}"


class CommonEqualityMixin(object):
    """  attribute-wise equality for value objects. """

    def __eq__(self, other):
        return isinstance(other, self.__class__) and self.__dict__ == other.__dict__

    def __ne__(self, other):
        return not self.__eq__(other)

    def __hash__(self):
        return hash(tuple(sorted(self.__dict__.items())))
