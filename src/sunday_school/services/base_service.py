"""
Base service layer for contract-driven database operations.

Every entity service sits on top of BaseService. Callers exchange API-shaped
(camelCase) dictionaries with the service; the contract of the resource is
the only place that knows how those names map onto table columns.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

import asyncpg

from sunday_school.contracts.base import FilterOperator, ResourceContract
from sunday_school.contracts.registry import get_all_contracts
from sunday_school.database.connection import get_db_pool
from sunday_school.utils.helpers import coerce_uuid, serialize_row, to_naive_utc

logger = logging.getLogger(__name__)

UPDATED_AT_SQL = "(NOW() AT TIME ZONE 'utc')"


class QueryValidationError(ValueError):
    """Raised when a request cannot be turned into a valid query"""


@dataclass
class ServiceResult:
    """Result from service operation"""
    success: bool
    data: Optional[List[Dict[str, Any]]] = None
    count: int = 0
    error: Optional[str] = None
    error_type: Optional[str] = None


class BaseService:
    """Base service that maps a resource contract onto SQL"""

    def __init__(self, resource_name: str):
        self.resource_name = resource_name
        self.contracts = get_all_contracts()

        if resource_name not in self.contracts:
            raise ValueError(f"Resource not found in contracts: {resource_name}")

        self.contract: ResourceContract = self.contracts[resource_name]
        self._alias_to_column = {f.alias: f.name for f in self.contract.fields}
        logger.info(f"BaseService initialized for resource: {resource_name}")

    @property
    def label(self) -> str:
        """Human readable singular name used in error messages"""
        return self.contract.label

    # Field mapping

    def to_columns(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Map an API dict onto writable columns"""
        values = {}
        for key, value in data.items():
            column = self._alias_to_column.get(key, key)
            if not self.contract.is_field_writable(column):
                raise QueryValidationError(f"Field is not writable: {key}")
            values[column] = self._prepare_value(value)
        return values

    def to_api(self, row: Any) -> Dict[str, Any]:
        """Serialize a database row into its API shape"""
        return serialize_row(dict(row))

    @staticmethod
    def _prepare_value(value: Any) -> Any:
        if isinstance(value, Enum):
            return value.value
        if isinstance(value, datetime):
            return to_naive_utc(value)
        return value

    # Public operations

    async def read(
        self,
        filters: Optional[Dict[str, Any]] = None,
        search: Optional[str] = None,
        order_by: Optional[List[Dict[str, str]]] = None,
        limit: Optional[int] = None,
        offset: int = 0
    ) -> ServiceResult:
        """
        Read records

        Args:
            filters: {column: value} or {column: {"op": ">=", "value": v}}
            search: case-insensitive substring matched against the search columns
            order_by: [{"field": "date", "dir": "desc"}]; contract default when omitted
            limit: maximum number of rows, unlimited when None
            offset: number of rows to skip

        Returns:
            ServiceResult with matched records
        """
        try:
            query, params = self._build_read_query(filters, search, order_by, limit, offset)
            rows = await self._fetch(query, params)
            data = [self.to_api(row) for row in rows]
            return ServiceResult(success=True, data=data, count=len(data))

        except QueryValidationError as e:
            return ServiceResult(success=False, error=str(e), error_type="INVALID_QUERY")
        except Exception as e:
            logger.error(f"Read operation failed for {self.resource_name}: {e}")
            return ServiceResult(success=False, error=str(e), error_type="EXECUTION_ERROR")

    async def count(
        self,
        filters: Optional[Dict[str, Any]] = None,
        search: Optional[str] = None
    ) -> ServiceResult:
        """Count records matching the filters; the number is in ServiceResult.count"""
        try:
            query, params = self._build_count_query(filters, search)
            pool = self._get_pool()
            async with pool.acquire() as conn:
                logger.debug(f"Executing COUNT query: {query} {params}")
                total = await conn.fetchval(query, *params)
            return ServiceResult(success=True, data=[], count=int(total or 0))

        except QueryValidationError as e:
            return ServiceResult(success=False, error=str(e), error_type="INVALID_QUERY")
        except Exception as e:
            logger.error(f"Count operation failed for {self.resource_name}: {e}")
            return ServiceResult(success=False, error=str(e), error_type="EXECUTION_ERROR")

    async def get_by_id(self, record_id: Any) -> ServiceResult:
        """
        Get a single record by primary key

        Malformed ids are reported as not found.
        """
        record_uuid = coerce_uuid(record_id)
        if record_uuid is None:
            return self._not_found()

        result = await self.read(filters={self.contract.id_field: record_uuid}, limit=1)
        if result.success and not result.data:
            return self._not_found()
        return result

    async def create(self, data: Dict[str, Any]) -> ServiceResult:
        """
        Create a new record

        Args:
            data: API dict of field values

        Returns:
            ServiceResult with created record data
        """
        try:
            values = self.to_columns(data)
            self._check_required(values)

            pool = self._get_pool()
            async with pool.acquire() as conn:
                async with conn.transaction():
                    row = await self._insert_row(conn, values)

            return ServiceResult(success=True, data=[self.to_api(row)], count=1)

        except Exception as e:
            return self._write_failure("Create", e)

    async def update(self, record_id: Any, data: Dict[str, Any]) -> ServiceResult:
        """
        Partially update a record; only supplied fields change

        Args:
            record_id: Primary key value of record to update
            data: API dict of field values to update

        Returns:
            ServiceResult with updated record data
        """
        record_uuid = coerce_uuid(record_id)
        if record_uuid is None:
            return self._not_found()

        try:
            values = self.to_columns(data)
            if not values:
                return ServiceResult(
                    success=False,
                    error="No fields provided for update",
                    error_type="INVALID_QUERY"
                )

            pool = self._get_pool()
            async with pool.acquire() as conn:
                async with conn.transaction():
                    row = await self._update_row(conn, record_uuid, values)

            if not row:
                return self._not_found()
            return ServiceResult(success=True, data=[self.to_api(row)], count=1)

        except Exception as e:
            return self._write_failure("Update", e)

    async def soft_delete(self, record_id: Any) -> ServiceResult:
        """Mark a record inactive; the row is retained"""
        if not self.contract.soft_delete:
            raise ValueError(f"{self.resource_name} does not support soft delete")
        logger.info(f"Deactivating {self.resource_name} {record_id}")
        return await self.update(record_id, {"isActive": False})

    async def delete(self, record_id: Any) -> ServiceResult:
        """
        Hard delete a record by primary key

        Returns:
            ServiceResult with the deleted record data
        """
        record_uuid = coerce_uuid(record_id)
        if record_uuid is None:
            return self._not_found()

        try:
            pool = self._get_pool()
            async with pool.acquire() as conn:
                async with conn.transaction():
                    await self._before_delete(conn, record_uuid)
                    query = (
                        f"DELETE FROM {self.contract.table} "
                        f"WHERE {self.contract.id_field} = $1 RETURNING *"
                    )
                    logger.info(f"Executing DELETE: {query}")
                    row = await conn.fetchrow(query, record_uuid)

            if not row:
                return self._not_found()
            return ServiceResult(success=True, data=[self.to_api(row)], count=1)

        except Exception as e:
            logger.error(f"Delete operation failed for {self.resource_name}: {e}")
            return ServiceResult(success=False, error=str(e), error_type="EXECUTION_ERROR")

    async def find_existing_ids(self, ids: List[Any], conn=None, contract: Optional[ResourceContract] = None) -> set:
        """Return the subset of ids that exist in this (or the given) resource's table"""
        contract = contract or self.contract
        uuids = [coerce_uuid(i) for i in ids]
        uuids = [u for u in uuids if u is not None]
        if not uuids:
            return set()

        query = (
            f"SELECT {contract.id_field} FROM {contract.table} "
            f"WHERE {contract.id_field} = ANY($1::uuid[])"
        )
        if conn is not None:
            rows = await conn.fetch(query, uuids)
        else:
            rows = await self._fetch(query, [uuids])
        return {str(row[contract.id_field]) for row in rows}

    # Hooks for subclasses

    async def _before_delete(self, conn, record_id) -> None:
        """Runs inside the delete transaction before the row is removed"""

    # SQL execution

    def _get_pool(self):
        db_pool = get_db_pool()
        if not db_pool:
            raise RuntimeError("Database pool not initialized")
        return db_pool

    async def _fetch(self, query: str, params: List[Any]) -> List[Any]:
        pool = self._get_pool()
        async with pool.acquire() as conn:
            logger.debug(f"Executing READ query: {query}")
            logger.debug(f"Parameters: {params}")
            return await conn.fetch(query, *params)

    async def _insert_row(self, conn, values: Dict[str, Any]):
        query, params = self._build_insert_query(values)
        logger.debug(f"Executing INSERT: {query}")
        row = await conn.fetchrow(query, *params)
        if not row:
            raise RuntimeError("Insert operation failed - no data returned")
        return row

    async def _update_row(self, conn, record_id, values: Dict[str, Any]):
        query, params = self._build_update_query(record_id, values)
        logger.debug(f"Executing UPDATE: {query}")
        return await conn.fetchrow(query, *params)

    # Result helpers

    def _not_found(self) -> ServiceResult:
        return ServiceResult(
            success=False,
            error=f"{self.label} not found",
            error_type="RESOURCE_NOT_FOUND"
        )

    def _write_failure(self, operation: str, exc: Exception) -> ServiceResult:
        """Translate a failed write into a ServiceResult"""
        if isinstance(exc, QueryValidationError):
            return ServiceResult(success=False, error=str(exc), error_type="INVALID_QUERY")
        if isinstance(exc, (asyncpg.IntegrityConstraintViolationError, asyncpg.DataError)):
            logger.warning(f"{operation} rejected for {self.resource_name}: {exc}")
            return ServiceResult(success=False, error=str(exc), error_type="INVALID_QUERY")

        logger.error(f"{operation} operation failed for {self.resource_name}: {exc}", exc_info=True)
        return ServiceResult(success=False, error=str(exc), error_type="EXECUTION_ERROR")

    def _check_required(self, values: Dict[str, Any]) -> None:
        for column in self.contract.required_fields():
            if values.get(column) is None:
                field = self.contract.get_field(column)
                raise QueryValidationError(f"{field.alias} is required")

    # Query builders

    def _build_read_query(
        self,
        filters: Optional[Dict[str, Any]],
        search: Optional[str],
        order_by: Optional[List[Dict[str, str]]],
        limit: Optional[int],
        offset: int = 0
    ) -> Tuple[str, List[Any]]:
        """Build SELECT query with WHERE, ORDER BY, LIMIT and OFFSET"""
        select_fields = ", ".join(self.contract.readable_columns())
        query = f"SELECT {select_fields} FROM {self.contract.table}"

        where_sql, params, param_counter = self._build_where(filters, search, 1)
        if where_sql:
            query += f" WHERE {where_sql}"

        order_parts = []
        for order_clause in (order_by or self.contract.default_order):
            field = order_clause["field"]
            direction = order_clause.get("dir", "asc").upper()
            if field not in self.contract.order_allowed:
                raise QueryValidationError(f"Ordering not allowed on field: {field}")
            if direction not in ("ASC", "DESC"):
                raise QueryValidationError(f"Invalid order direction: {direction}")
            order_parts.append(f"{field} {direction}")
        if order_parts:
            query += f" ORDER BY {', '.join(order_parts)}"

        if limit is not None:
            query += f" LIMIT ${param_counter}"
            params.append(limit)
            param_counter += 1

        if offset > 0:
            query += f" OFFSET ${param_counter}"
            params.append(offset)
            param_counter += 1

        return query, params

    def _build_count_query(
        self,
        filters: Optional[Dict[str, Any]],
        search: Optional[str]
    ) -> Tuple[str, List[Any]]:
        query = f"SELECT COUNT(*) FROM {self.contract.table}"
        where_sql, params, _ = self._build_where(filters, search, 1)
        if where_sql:
            query += f" WHERE {where_sql}"
        return query, params

    def _build_insert_query(self, values: Dict[str, Any]) -> Tuple[str, List[Any]]:
        """Build SQL INSERT query; omitted columns take their database defaults"""
        field_names = list(values.keys())
        params = list(values.values())

        if field_names:
            placeholders = [f"${i}" for i in range(1, len(params) + 1)]
            query = (
                f"INSERT INTO {self.contract.table} ({', '.join(field_names)}) "
                f"VALUES ({', '.join(placeholders)}) RETURNING *"
            )
        else:
            query = f"INSERT INTO {self.contract.table} DEFAULT VALUES RETURNING *"

        return query, params

    def _build_update_query(self, record_id: Any, values: Dict[str, Any]) -> Tuple[str, List[Any]]:
        """Build SQL UPDATE query; updated_at is always refreshed"""
        params = []
        param_counter = 1

        set_parts = []
        for field_name, value in values.items():
            set_parts.append(f"{field_name} = ${param_counter}")
            params.append(value)
            param_counter += 1
        set_parts.append(f"updated_at = {UPDATED_AT_SQL}")

        query = (
            f"UPDATE {self.contract.table} SET {', '.join(set_parts)} "
            f"WHERE {self.contract.id_field} = ${param_counter} RETURNING *"
        )
        params.append(record_id)

        return query, params

    def _build_where(
        self,
        filters: Optional[Dict[str, Any]],
        search: Optional[str],
        param_counter: int
    ) -> Tuple[str, List[Any], int]:
        where_parts = []
        params = []

        for field_name, filter_spec in (filters or {}).items():
            if isinstance(filter_spec, dict):
                op = filter_spec.get("op", "=")
                value = filter_spec.get("value")
            else:
                op = "="
                value = filter_spec

            where_sql, where_params, param_counter = self._build_where_clause(
                field_name, op, value, param_counter
            )
            where_parts.append(where_sql)
            params.extend(where_params)

        if search:
            columns = self.contract.search_fields
            if columns:
                pattern = "%" + _escape_like(search.strip()) + "%"
                ors = " OR ".join(f"{column} ILIKE ${param_counter}" for column in columns)
                where_parts.append(f"({ors})")
                params.append(pattern)
                param_counter += 1

        return " AND ".join(where_parts), params, param_counter

    def _build_where_clause(self, field: str, op: str, value: Any, param_counter: int) -> Tuple[str, List[Any], int]:
        """Build WHERE clause SQL for a single filter"""
        try:
            operator = FilterOperator(op)
        except ValueError:
            raise QueryValidationError(f"Unsupported WHERE operator: {op}")

        if operator not in self.contract.get_allowed_operators(field):
            raise QueryValidationError(f"Filter not allowed: {field} {op}")

        value = self._prepare_value(value)
        params = []

        if operator == FilterOperator.CONTAINS:
            association = self.contract.get_association(field)
            member_id = coerce_uuid(value)
            if member_id is None:
                raise QueryValidationError(f"Invalid id for {field}: {value}")
            sql = (
                f"EXISTS (SELECT 1 FROM {association.table} j "
                f"WHERE j.{association.owner_column} = {self.contract.table}.{self.contract.id_field} "
                f"AND j.{association.member_column} = ${param_counter})"
            )
            params.append(member_id)
            param_counter += 1
        elif operator == FilterOperator.IN:
            if isinstance(value, (list, tuple, set)):
                if not value:
                    return "FALSE", params, param_counter
                placeholders = []
                for item in value:
                    placeholders.append(f"${param_counter}")
                    params.append(self._prepare_value(item))
                    param_counter += 1
                sql = f"{field} IN ({', '.join(placeholders)})"
            else:
                sql = f"{field} = ${param_counter}"
                params.append(value)
                param_counter += 1
        elif operator == FilterOperator.BETWEEN:
            if isinstance(value, (list, tuple)) and len(value) == 2:
                sql = f"{field} BETWEEN ${param_counter} AND ${param_counter + 1}"
                params.extend(self._prepare_value(v) for v in value)
                param_counter += 2
            else:
                raise QueryValidationError(f"BETWEEN operator requires array of 2 values, got: {value}")
        else:
            sql = f"{field} {operator.value} ${param_counter}"
            params.append(value)
            param_counter += 1

        return sql, params, param_counter


def _escape_like(text: str) -> str:
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def date_range_filter(start: Optional[datetime], end: Optional[datetime]) -> Optional[Dict[str, Any]]:
    """Filter spec for an inclusive date range with optional bounds"""
    if start and end:
        return {"op": "BETWEEN", "value": [start, end]}
    if start:
        return {"op": ">=", "value": start}
    if end:
        return {"op": "<=", "value": end}
    return None
