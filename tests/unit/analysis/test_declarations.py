"""Unit tests for declaration classification."""

from conftest import func_decl, type_decl

from modgraph.analysis.declarations import DeclStat, classify
from modgraph.core.models import Declaration, DeclKind


class TestDeclStat:
    """Test DeclStat arithmetic."""

    def test_defaults_are_zero(self):
        """Test a fresh stat has all counters at zero."""
        stat = DeclStat()
        assert stat.to_dict() == {
            "functions": 0,
            "all_types": 0,
            "contract_types": 0,
            "constants": 0,
            "variables": 0,
            "other": 0,
        }
        assert stat.total == 0

    def test_add_in_place(self):
        """Test add() accumulates every counter."""
        stat = DeclStat(functions=1, all_types=2, contract_types=1)
        stat.add(DeclStat(functions=2, constants=3, variables=4, other=5))

        assert stat == DeclStat(
            functions=3, all_types=2, contract_types=1, constants=3, variables=4, other=5
        )

    def test_sub_in_place(self):
        """Test sub() removes a subset's contribution."""
        stat = DeclStat(functions=5, all_types=4, contract_types=2, other=1)
        stat.sub(DeclStat(functions=2, all_types=1, contract_types=1))

        assert stat == DeclStat(functions=3, all_types=3, contract_types=1, other=1)

    def test_operators_return_new_instances(self):
        """Test + and - leave their operands untouched."""
        a = DeclStat(functions=1)
        b = DeclStat(functions=2, variables=1)

        total = a + b
        diff = b - a

        assert total == DeclStat(functions=3, variables=1)
        assert diff == DeclStat(functions=1, variables=1)
        assert a == DeclStat(functions=1)
        assert b == DeclStat(functions=2, variables=1)

    def test_total_does_not_double_count_contracts(self):
        """Test contract types are a subset of all types in the total."""
        stat = DeclStat(functions=1, all_types=3, contract_types=2, constants=1)
        assert stat.total == 5


class TestClassify:
    """Test classify()."""

    def test_empty(self):
        """Test an empty declaration list."""
        assert classify([]) == DeclStat()

    def test_each_kind_counted_once(self):
        """Test every declaration lands in exactly one bucket."""
        stat = classify(
            [
                func_decl("run"),
                func_decl("_helper"),
                type_decl("Buffer"),
                Declaration(DeclKind.CONSTANT, "LIMIT", exported=True),
                Declaration(DeclKind.VARIABLE, "state"),
                Declaration(DeclKind.OTHER),
            ]
        )

        assert stat == DeclStat(
            functions=2, all_types=1, contract_types=0, constants=1, variables=1, other=1
        )
        assert stat.total == 6

    def test_exported_contract_counts_both(self):
        """Test an exported contract increments all_types and contract_types."""
        stat = classify([type_decl("Reader", contract=True)])
        assert stat.all_types == 1
        assert stat.contract_types == 1

    def test_unexported_contract_counts_as_type_only(self):
        """Test a private contract is not counted as abstract."""
        stat = classify([type_decl("_reader", contract=True, exported=False)])
        assert stat.all_types == 1
        assert stat.contract_types == 0

    def test_contract_flag_ignored_on_non_types(self):
        """Test the contract flag only matters for type declarations."""
        stat = classify([Declaration(DeclKind.FUNCTION, "f", exported=True, contract=True)])
        assert stat.functions == 1
        assert stat.contract_types == 0

    def test_malformed_declarations_are_other(self):
        """Test entries that are not declarations never raise."""
        stat = classify([None, "def f(): pass", 42, {"kind": "function"}])
        assert stat == DeclStat(other=4)

    def test_accepts_generators(self):
        """Test any iterable is accepted."""
        stat = classify(func_decl(f"f{i}") for i in range(3))
        assert stat.functions == 3
