"""Unit tests for the generic DB-API 2.0 database handle."""

import pytest

from dbfunc.adapters.dbapi import DbApiDatabase
from dbfunc.core.parameters import DbType, ParameterDirection
from dbfunc.exceptions import DatabaseConnectionError, ExecutionError, ImproperConfigurationError
from tests.unit.conftest import FakeConnection, FakeCursor


def test_unsupported_paramstyle_is_rejected() -> None:
    with pytest.raises(ImproperConfigurationError):
        DbApiDatabase("fake://db", connect=lambda _: None, paramstyle="dollar")


def test_connection_string_is_passed_to_connect(fake_connection: FakeConnection) -> None:
    seen: list[str] = []

    def connect(connection_string: str) -> FakeConnection:
        seen.append(connection_string)
        return fake_connection

    database = DbApiDatabase("fake://orders", connect=connect)
    database.execute_non_query(database.get_sql_string_command("DELETE FROM t"))
    assert seen == ["fake://orders"]


def test_named_parameters_are_sent_as_mapping(fake_database: DbApiDatabase, fake_connection: FakeConnection) -> None:
    command = fake_database.get_sql_string_command("SELECT * FROM customer WHERE id = :CustomerID")
    fake_database.add_in_parameter(command, "@CustomerID", DbType.INT32, 3)

    fake_database.execute_dataset(command)

    assert fake_connection.executed == [("SELECT * FROM customer WHERE id = :CustomerID", {"CustomerID": 3})]


def test_positional_parameters_are_sent_in_bind_order(fake_connection: FakeConnection) -> None:
    database = DbApiDatabase("fake://db", connect=lambda _: fake_connection, paramstyle="qmark")
    command = database.get_sql_string_command("UPDATE t SET a = ? WHERE b = ?")
    database.add_in_parameter(command, "A", DbType.INT32, 1)
    database.add_in_parameter(command, "B", DbType.STRING, "x")

    database.execute_non_query(command)

    assert fake_connection.executed == [("UPDATE t SET a = ? WHERE b = ?", [1, "x"])]


def test_non_query_returns_rowcount_and_commits(fake_database: DbApiDatabase, fake_connection: FakeConnection) -> None:
    fake_connection.responses["DELETE FROM t"] = {"rowcount": 3}

    assert fake_database.execute_non_query(fake_database.get_sql_string_command("DELETE FROM t")) == 3
    assert fake_connection.commits == 1
    assert fake_connection.rollbacks == 0
    assert fake_connection.closes == 1
    assert all(cursor.closed for cursor in fake_connection.cursors)


def test_scalar_returns_first_column_of_first_row(fake_database: DbApiDatabase, fake_connection: FakeConnection) -> None:
    fake_connection.responses["SELECT name, id FROM t"] = {"sets": [(["name", "id"], [("Ada", 1), ("Bob", 2)])]}
    assert fake_database.execute_scalar(fake_database.get_sql_string_command("SELECT name, id FROM t")) == "Ada"


@pytest.mark.parametrize("response", [{}, {"sets": [(["id"], [])]}])
def test_scalar_without_rows_is_none(
    fake_database: DbApiDatabase, fake_connection: FakeConnection, response: dict
) -> None:
    fake_connection.responses["SELECT id FROM t"] = response
    assert fake_database.execute_scalar(fake_database.get_sql_string_command("SELECT id FROM t")) is None


def test_dataset_collects_every_result_set(fake_database: DbApiDatabase, fake_connection: FakeConnection) -> None:
    fake_connection.responses["batch"] = {
        "sets": [(["id", "name"], [(1, "Ada"), (2, "Bob")]), (["total"], [(2,)])],
    }

    result = fake_database.execute_dataset(fake_database.get_sql_string_command("batch"))

    assert len(result) == 2
    first, second = result
    assert first.column_names == ["id", "name"]
    assert first.rows == [{"id": 1, "name": "Ada"}, {"id": 2, "name": "Bob"}]
    assert first.name == ""
    assert second.get_first() == {"total": 2}


def test_dataset_without_result_sets_is_empty(fake_database: DbApiDatabase) -> None:
    result = fake_database.execute_dataset(fake_database.get_sql_string_command("UPDATE t SET a = 1"))
    assert len(result) == 0
    assert result.first() is None


def test_stored_procedure_reports_output_values(fake_database: DbApiDatabase, fake_connection: FakeConnection) -> None:
    fake_connection.responses["dbo.SpGetCustomer"] = {"outputs": {1: "Ada", 2: 10}, "rowcount": 1}
    command = fake_database.get_stored_proc_command("dbo.SpGetCustomer")
    customer_id = fake_database.add_in_parameter(command, "CustomerID", DbType.INT32, 1)
    name = fake_database.add_out_parameter(command, "Name", DbType.STRING, 100)
    counter = fake_database.add_parameter(command, "Counter", DbType.INT32, 4, ParameterDirection.INPUT_OUTPUT, 9)

    assert fake_database.execute_non_query(command) == 1

    assert fake_connection.called == [("dbo.SpGetCustomer", [1, None, 9])]
    assert customer_id.value == 1
    assert name.value == "Ada"
    assert counter.value == 10


def test_stored_procedure_without_callproc_fails(fake_database: DbApiDatabase, fake_connection: FakeConnection) -> None:
    fake_connection.cursor_class = FakeCursor

    with pytest.raises(ExecutionError) as exc_info:
        fake_database.execute_non_query(fake_database.get_stored_proc_command("dbo.SpGetCustomer"))

    assert exc_info.value.command_text == "dbo.SpGetCustomer"
    assert fake_connection.rollbacks == 1
    assert fake_connection.closes == 1


def test_driver_errors_are_wrapped(fake_database: DbApiDatabase, fake_connection: FakeConnection) -> None:
    cause = RuntimeError("deadlock victim")
    fake_connection.responses["UPDATE t SET a = 1"] = {"error": cause}

    with pytest.raises(ExecutionError, match="deadlock victim") as exc_info:
        fake_database.execute_non_query(fake_database.get_sql_string_command("UPDATE t SET a = 1"))

    assert exc_info.value.__cause__ is cause
    assert exc_info.value.command_text == "UPDATE t SET a = 1"
    assert fake_connection.commits == 0
    assert fake_connection.rollbacks == 1
    assert all(cursor.closed for cursor in fake_connection.cursors)


def test_connect_failure_raises_connection_error() -> None:
    def connect(_: str) -> FakeConnection:
        raise OSError("server unreachable")

    database = DbApiDatabase("fake://db", connect=connect)
    with pytest.raises(DatabaseConnectionError, match="server unreachable"):
        database.execute_scalar(database.get_sql_string_command("SELECT 1"))
