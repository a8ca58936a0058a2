"""
Service layer for resources that own many-to-many associations.

Associations live in junction tables described by the resource contract.
A write validates every referenced member id before touching any row and
replaces each supplied relation inside the same transaction as the owning
row's insert or update.
"""

import asyncio
import logging
from typing import Any, Dict, List, Tuple

from sunday_school.contracts.base import AssociationDefinition
from sunday_school.services.base_service import BaseService, ServiceResult, QueryValidationError
from sunday_school.utils.helpers import coerce_uuid, serialize_row, unique_ids

logger = logging.getLogger(__name__)


class AssociatedEntityService(BaseService):
    """BaseService plus junction-table association handling"""

    def split_associations(self, data: Dict[str, Any]) -> Tuple[Dict[str, Any], Dict[str, List[str]]]:
        """Separate column fields from association id lists"""
        fields = {}
        relations = {}
        for key, value in data.items():
            if self.contract.get_association(key):
                relations[key] = unique_ids(value)
            else:
                fields[key] = value
        return fields, relations

    async def create(self, data: Dict[str, Any]) -> ServiceResult:
        """
        Create a record together with its associations

        Every referenced child/teacher id must exist, otherwise nothing is written.
        """
        try:
            fields, relations = self.split_associations(data)
            values = self.to_columns(fields)
            self._check_required(values)

            pool = self._get_pool()
            async with pool.acquire() as conn:
                async with conn.transaction():
                    await self._validate_members(conn, relations)
                    row = await self._insert_row(conn, values)
                    owner_id = row[self.contract.id_field]
                    for relation, ids in relations.items():
                        await self._replace(conn, self.contract.get_association(relation), owner_id, ids)

            logger.info(f"Created {self.resource_name} {owner_id}")
            return ServiceResult(success=True, data=[self.to_api(row)], count=1)

        except Exception as e:
            return self._write_failure("Create", e)

    async def update(self, record_id: Any, data: Dict[str, Any]) -> ServiceResult:
        """
        Partially update a record; supplied relations are replaced as a whole
        """
        record_uuid = coerce_uuid(record_id)
        if record_uuid is None:
            return self._not_found()

        try:
            fields, relations = self.split_associations(data)
            values = self.to_columns(fields)
            if not values and not relations:
                return ServiceResult(
                    success=False,
                    error="No fields provided for update",
                    error_type="INVALID_QUERY"
                )

            pool = self._get_pool()
            async with pool.acquire() as conn:
                async with conn.transaction():
                    await self._validate_members(conn, relations)
                    row = await self._update_row(conn, record_uuid, values)
                    if row:
                        for relation, ids in relations.items():
                            await self._replace(conn, self.contract.get_association(relation), record_uuid, ids)

            if not row:
                return self._not_found()
            return ServiceResult(success=True, data=[self.to_api(row)], count=1)

        except Exception as e:
            return self._write_failure("Update", e)

    async def replace_associations(self, owner_id: Any, relation: str, ids: List[Any]) -> ServiceResult:
        """
        Replace the full member set of one relation

        Returns:
            ServiceResult whose data lists the stored member ids
        """
        association = self.contract.get_association(relation)
        if association is None:
            return ServiceResult(
                success=False,
                error=f"Unknown relation: {relation}",
                error_type="INVALID_QUERY"
            )

        owner_uuid = coerce_uuid(owner_id)
        if owner_uuid is None:
            return self._not_found()

        member_ids = unique_ids(ids)
        try:
            pool = self._get_pool()
            async with pool.acquire() as conn:
                async with conn.transaction():
                    exists = await conn.fetchval(
                        f"SELECT EXISTS(SELECT 1 FROM {self.contract.table} WHERE {self.contract.id_field} = $1)",
                        owner_uuid
                    )
                    if not exists:
                        return self._not_found()
                    await self._validate_members(conn, {relation: member_ids})
                    await self._replace(conn, association, owner_uuid, member_ids)
                    await conn.execute(
                        f"UPDATE {self.contract.table} SET updated_at = (NOW() AT TIME ZONE 'utc') "
                        f"WHERE {self.contract.id_field} = $1",
                        owner_uuid
                    )

            return ServiceResult(success=True, data=[{relation: member_ids}], count=len(member_ids))

        except Exception as e:
            return self._write_failure("Replace associations", e)

    async def hydrate(
        self,
        rows: List[Dict[str, Any]],
        relations: Dict[str, List[str]]
    ) -> List[Dict[str, Any]]:
        """
        Attach member summaries to each row

        Args:
            rows: API-shaped rows of this resource
            relations: relation name -> member API fields to include (id is always included)

        Returns:
            The same rows, each carrying one list per requested relation
        """
        if not rows or not relations:
            return rows

        owner_ids = [coerce_uuid(row["id"]) for row in rows]
        names = list(relations.keys())
        fetched = await asyncio.gather(*(
            self._fetch_members(self.contract.get_association(name), owner_ids, relations[name])
            for name in names
        ))

        for name, members_by_owner in zip(names, fetched):
            for row in rows:
                row[name] = members_by_owner.get(row["id"], [])
        return rows

    async def _before_delete(self, conn, record_id) -> None:
        for association in self.contract.associations:
            await conn.execute(
                f"DELETE FROM {association.table} WHERE {association.owner_column} = $1",
                record_id
            )

    async def _validate_members(self, conn, relations: Dict[str, List[str]]) -> None:
        for relation, ids in relations.items():
            if not ids:
                continue
            association = self.contract.get_association(relation)
            found = await self.find_existing_ids(
                ids, conn=conn, contract=self.contracts[association.member_resource]
            )
            if len(found) != len(ids):
                raise QueryValidationError(f"One or more {association.member_label} not found")

    async def _replace(self, conn, association: AssociationDefinition, owner_id, ids: List[str]) -> None:
        await conn.execute(
            f"DELETE FROM {association.table} WHERE {association.owner_column} = $1",
            owner_id
        )
        if ids:
            await conn.executemany(
                f"INSERT INTO {association.table} ({association.owner_column}, {association.member_column}) "
                f"VALUES ($1, $2)",
                [(owner_id, coerce_uuid(member_id)) for member_id in ids]
            )
        logger.debug(f"Replaced {association.table} for {owner_id} with {len(ids)} members")

    def _build_members_query(
        self,
        association: AssociationDefinition,
        fields: List[str]
    ) -> str:
        member_contract = self.contracts[association.member_resource]
        alias_to_column = {f.alias: f.name for f in member_contract.fields}

        columns = ["id"]
        for field in fields:
            column = alias_to_column.get(field)
            if column is None or not member_contract.is_field_readable(column):
                raise QueryValidationError(f"Unknown {association.member_resource} field: {field}")
            if column not in columns:
                columns.append(column)

        select = ", ".join(f"m.{column}" for column in columns)
        return (
            f"SELECT j.{association.owner_column} AS owner_id, {select} "
            f"FROM {association.table} j "
            f"JOIN {member_contract.table} m ON m.id = j.{association.member_column} "
            f"WHERE j.{association.owner_column} = ANY($1::uuid[]) "
            f"ORDER BY m.name"
        )

    async def _fetch_members(
        self,
        association: AssociationDefinition,
        owner_ids: List[Any],
        fields: List[str]
    ) -> Dict[str, List[Dict[str, Any]]]:
        query = self._build_members_query(association, fields)
        rows = await self._fetch(query, [owner_ids])

        members: Dict[str, List[Dict[str, Any]]] = {}
        for row in rows:
            record = dict(row)
            owner = str(record.pop("owner_id"))
            members.setdefault(owner, []).append(serialize_row(record))
        return members


def get_relation_ids(row: Dict[str, Any], relation: str) -> List[str]:
    """Ids of the hydrated members of one relation"""
    return [member["id"] for member in row.get(relation) or []]


def relation_size(row: Dict[str, Any], relation: str) -> int:
    return len(row.get(relation) or [])
