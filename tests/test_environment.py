"""
Tests for the variable environment.
"""

from phpcore import Environment, Scope, int_val, string_val, null_val, bool_val, float_val


class TestSetGet:
    """Test binding and lookup."""

    def test_set_and_get(self, tracker):
        env = Environment()
        v = int_val(1, tracker)
        assert env.set("x", v)
        assert env.get("x") is v
        assert len(env) == 1

    def test_get_missing(self):
        assert Environment().get("nope") is None

    def test_get_is_borrowed(self, tracker):
        """get() does not add an ownership unit."""
        env = Environment()
        v = int_val(1, tracker)
        env.set("x", v)
        env.get("x")
        assert v.refcount == 1

    def test_overwrite_replaces_and_destroys(self, tracker):
        """A second set keeps one entry and destroys the old value."""
        env = Environment()
        v1 = string_val("one", tracker)
        v2 = string_val("two", tracker)
        env.set("name", v1)
        env.set("name", v2)
        assert len(env) == 1
        assert env.get("name") is v2
        assert v1.released
        assert tracker.live == 1

    def test_set_same_value_with_extra_reference(self, tracker):
        env = Environment()
        v = int_val(3, tracker)
        env.set("x", v)
        env.set("x", v.ref())
        assert env.get("x") is v
        assert v.refcount == 1

    def test_set_rejects_none(self, tracker):
        env = Environment()
        assert not env.set(None, int_val(1, tracker))
        assert not env.set("x", None)
        assert len(env) == 0

    def test_insertion_order(self, tracker):
        env = Environment()
        for name in ["a", "b", "c"]:
            env.set(name, int_val(0, tracker))
        assert env.names() == ["a", "b", "c"]

    def test_entries_are_global(self, tracker):
        env = Environment()
        env.set("x", int_val(0, tracker))
        assert [e.scope for e in env] == [Scope.GLOBAL]

    def test_capacity_doubles(self, tracker):
        env = Environment(capacity=2)
        for i in range(5):
            env.set(f"v{i}", int_val(i, tracker))
        assert env.capacity == 8
        assert len(env) == 5


class TestUnset:
    """Test removal."""

    def test_unset_existing(self, tracker):
        env = Environment()
        v = int_val(1, tracker)
        env.set("x", v)
        assert env.unset("x")
        assert env.get("x") is None
        assert v.released

    def test_unset_missing(self, tracker):
        env = Environment()
        env.set("x", int_val(1, tracker))
        assert not env.unset("y")
        assert env.names() == ["x"]

    def test_unset_moves_last_entry(self, tracker):
        """The last entry fills the freed slot."""
        env = Environment()
        for name in ["a", "b", "c", "d"]:
            env.set(name, int_val(0, tracker))
        env.unset("b")
        assert env.names() == ["a", "d", "c"]

    def test_unset_last_entry(self, tracker):
        env = Environment()
        for name in ["a", "b"]:
            env.set(name, int_val(0, tracker))
        env.unset("b")
        assert env.names() == ["a"]

    def test_clear_destroys_all(self, tracker):
        env = Environment()
        for name in ["a", "b", "c"]:
            env.set(name, string_val(name, tracker))
        env.clear()
        assert len(env) == 0
        assert tracker.live == 0


class TestIssetEmpty:
    """Test isset() and empty()."""

    def test_isset(self, tracker):
        env = Environment()
        env.set("x", null_val(tracker))
        assert env.isset("x")
        assert "x" in env
        assert not env.isset("y")

    def test_empty_unset_name(self):
        assert Environment().empty("missing")

    def test_empty_falsy_values(self, tracker):
        env = Environment()
        env.set("n", null_val(tracker))
        env.set("f", bool_val(False, tracker))
        env.set("i", int_val(0, tracker))
        env.set("d", float_val(0.0, tracker))
        env.set("s", string_val("", tracker))
        assert all(env.empty(name) for name in "nfids")

    def test_not_empty(self, tracker):
        env = Environment()
        env.set("i", int_val(7, tracker))
        env.set("s", string_val("0", tracker))
        assert not env.empty("i")
        assert not env.empty("s")
