"""Tests for loading catalog objects from SHOW output"""

import warnings
from unittest.mock import Mock, patch

import pytest

from snowrefresh.errors import AnalysisError
from snowrefresh.models import MaterializedView, Table, View
from snowrefresh.models.show import Show, extract_defining_query, load_schema_objects


class TestShow:
    """Tests for SHOW command construction."""

    @patch("snowrefresh.models.show.Executor")
    def test_execute_builds_bound_query(self, mock_executor_class):
        import pandas as pd

        run = mock_executor_class.return_value.run_with_result_scan
        run.return_value.to_df.return_value = pd.DataFrame({"name": ["ORDERS"]})

        records = Show(Mock()).execute("TABLES", "SALESDB.PUBLIC", like="ORD%")

        run.assert_called_once_with(
            "SHOW TABLES LIKE %s IN SCHEMA IDENTIFIER(%s)",
            bindings=("ORD%", "SALESDB.PUBLIC"),
        )
        assert records == [{"name": "ORDERS"}]

    @patch("snowrefresh.models.show.Executor")
    def test_execute_empty(self, mock_executor_class):
        import pandas as pd

        run = mock_executor_class.return_value.run_with_result_scan
        run.return_value.to_df.return_value = pd.DataFrame()

        assert Show(Mock()).execute("VIEWS") == []
        run.assert_called_once_with("SHOW VIEWS", bindings=())


class TestExtractDefiningQuery:
    """Tests for view text parsing."""

    def test_create_view(self):
        text = "CREATE OR REPLACE VIEW big_orders AS SELECT id FROM orders WHERE amount > 100"
        assert extract_defining_query(text) == "SELECT id FROM orders WHERE amount > 100"

    def test_create_materialized_view(self):
        text = "create materialized view orders_mv as select id, amount from orders"
        assert extract_defining_query(text) == "SELECT id, amount FROM orders"

    def test_plain_select_passes_through(self):
        assert extract_defining_query("SELECT 1") == "SELECT 1"

    def test_unparseable_text(self):
        with pytest.raises(AnalysisError, match="Cannot parse view text"):
            extract_defining_query("CREATE VIEW v AS SELECT * FROM (SELECT 1")

    def test_unterminated_string_in_text(self):
        with pytest.raises(AnalysisError, match="Cannot parse view text"):
            extract_defining_query("CREATE VIEW v AS SELECT 'oops FROM t")


class TestLoadSchemaObjects:
    """Tests for filling a Database from SHOW TABLES / SHOW VIEWS."""

    @staticmethod
    def _show_results(tables, views):
        def execute(object_plural, schema_fqn=None, like=None):
            return tables if object_plural == "TABLES" else views
        return execute

    def test_loads_tables_views_and_materialized_views(self, sales_db):
        tables = [{"name": "ORDERS"}]
        views = [
            {"name": "BIG_ORDERS", "text": "CREATE VIEW BIG_ORDERS AS SELECT * FROM ORDERS",
             "is_materialized": "false"},
            {"name": "ORDERS_MV", "text": "CREATE MATERIALIZED VIEW ORDERS_MV AS SELECT ID FROM ORDERS",
             "is_materialized": "true"},
        ]

        with patch.object(Show, "execute", side_effect=self._show_results(tables, views)):
            loaded = load_schema_objects(sales_db, Mock(), "SALESDB.PUBLIC")

        assert [type(o) for o in loaded] == [Table, View, MaterializedView]
        mv = sales_db.get_table("orders_mv")
        assert isinstance(mv, MaterializedView)
        assert mv.query_sql == "SELECT ID FROM ORDERS"
        assert mv.env_info.db_id == sales_db.id

    def test_existing_objects_kept(self, sales_db, orders):
        with patch.object(Show, "execute", side_effect=self._show_results([{"name": "ORDERS"}], [])):
            loaded = load_schema_objects(sales_db, Mock(), "SALESDB.PUBLIC")

        assert loaded == []
        assert sales_db.get_table("orders") is orders

    def test_quoted_identifiers_skipped_with_warning(self, sales_db):
        tables = [{"name": "VALID_TABLE"}, {"name": "my table"}, {"name": "ANOTHER"}]

        with patch.object(Show, "execute", side_effect=self._show_results(tables, [])):
            with warnings.catch_warnings(record=True) as w:
                warnings.simplefilter("always")
                loaded = load_schema_objects(sales_db, Mock(), "SALESDB.PUBLIC")

        assert [o.name for o in loaded] == ["VALID_TABLE", "ANOTHER"]
        assert len(w) == 1
        assert "my table" in str(w[0].message)
        assert "quoted identifier" in str(w[0].message).lower()
