class Cancelled(object):
    """Marker carried through the resolve path of a cancelled promise chain."""

    __slots__ = ('reason',)

    def __init__(self, reason=None):
        self.reason = reason

    def __eq__(self, other):
        return isinstance(other, Cancelled) and other.reason == self.reason

    def __hash__(self):
        return hash((Cancelled, repr(self.reason)))

    def __repr__(self):
        return 'Cancelled<reason={!r}>'.format(self.reason)


def is_cancelled(value):
    return isinstance(value, Cancelled)
