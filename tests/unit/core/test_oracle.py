"""Unit tests for the method-set compatibility oracle."""

from conftest import concrete, contract

from modgraph.core.oracle import CompatibilityOracle, MethodSetOracle


class TestMethodSetOracle:
    """Test MethodSetOracle.implements()."""

    def test_superset_satisfies(self):
        """Test a type with extra methods satisfies a smaller contract."""
        oracle = MethodSetOracle()
        assert oracle.implements(concrete("File", "read", "close"), contract("Reader", "read"))

    def test_missing_method(self):
        """Test a missing operation fails the check."""
        oracle = MethodSetOracle()
        assert not oracle.implements(
            concrete("File", "read"), contract("ReadCloser", "read", "close")
        )

    def test_reference_methods(self):
        """Test reference-level methods count only when asked for."""
        oracle = MethodSetOracle()
        buf = concrete("Buffer", "read", reference=("close",))
        closer = contract("ReadCloser", "read", "close")

        assert not oracle.implements(buf, closer)
        assert oracle.implements(buf, closer, by_reference=True)

    def test_satisfies_protocol(self):
        """Test MethodSetOracle is usable where an oracle is expected."""
        oracle: CompatibilityOracle = MethodSetOracle()
        assert oracle.implements(concrete("T"), contract("Empty"))
