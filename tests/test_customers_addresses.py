"""Tests for listing a customer's addresses and picking one of them."""

from custrack.customers.addresses import choose_address, list_and_select, list_customer_addresses
from custrack.customers.results import Found, NoRelationship, NotFound, StorageError


class TestListCustomerAddresses:

    def test_only_owned_rows_in_id_order(self, memory_db, jdoe, jdoe_addresses):
        ids, other = jdoe_addresses
        rows = list_customer_addresses(memory_db, jdoe)
        assert [r["address_id"] for r in rows] == sorted(ids)
        assert other not in [r["address_id"] for r in rows]

    def test_customer_without_addresses(self, memory_db, jdoe):
        assert list_customer_addresses(memory_db, jdoe) == []


class TestListAndSelect:

    def test_foreign_address_id_is_rejected(self, memory_db, jdoe_addresses, operator_input, capsys):
        ids, other = jdoe_addresses
        operator_input(other, ids[0])

        assert list_and_select(memory_db, "JDOE") == Found(ids[0])
        out = capsys.readouterr().out
        assert "Please enter an address ID belonging to customer JDOE." in out
        assert "Address identified." in out

    def test_nonexistent_address_id_is_rejected(self, memory_db, jdoe_addresses, operator_input, capsys):
        ids, _ = jdoe_addresses
        operator_input(99999, "abc", ids[1])

        assert list_and_select(memory_db, "JDOE") == Found(ids[1])
        out = capsys.readouterr().out
        assert out.count("Please enter an address ID belonging to customer JDOE.") == 1

    def test_every_owned_address_is_offered(self, memory_db, jdoe_addresses, operator_input, capsys):
        ids, _ = jdoe_addresses
        for address_id in ids:
            operator_input(address_id)
            assert list_and_select(memory_db, "JDOE") == Found(address_id)

        out = capsys.readouterr().out
        assert "Customer JDOE is associated with 2 address(es):" in out
        assert "1 High Street" in out
        assert "2 Low Road" in out
        assert "9 Far Away" not in out

    def test_customer_without_addresses(self, memory_db, jdoe, capsys):
        assert list_and_select(memory_db, "JDOE") == NoRelationship(jdoe)
        assert "associated with" not in capsys.readouterr().out

    def test_unknown_customer(self, memory_db):
        assert list_and_select(memory_db, "NOBODY") == NotFound("NOBODY")

    def test_storage_error(self, memory_db, jdoe):
        memory_db.execute("DROP TABLE customer_addresses")
        assert isinstance(list_and_select(memory_db, "JDOE"), StorageError)


def test_choose_address_loops_until_valid(operator_input, capsys):
    operator_input(3, 7)
    assert choose_address("JDOE", {5, 7}, "Address ID") == 7
    assert "belonging to customer JDOE" in capsys.readouterr().out
