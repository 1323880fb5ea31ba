"""Collection Records Use Case: generic upsert/delete in named collections."""

from typing import Any

from pydantic import ValidationError as PydanticValidationError

from brewledger.application.gateway import YearDatasetGateway
from brewledger.config import get_logger
from brewledger.core.entities.base import LedgerModel
from brewledger.core.entities.batch import COST_INPUT_FIELDS, BrewHeader
from brewledger.core.entities.dataset import COLLECTIONS, CollectionDef
from brewledger.core.entities.master_data import CostCoefficients
from brewledger.core.exceptions import (
    CostAnalysisClosedError,
    RecordNotFoundError,
    ValidationError,
)
from brewledger.core.values import normalize

logger = get_logger(__name__)


def _collection(name: str) -> CollectionDef:
    definition = COLLECTIONS.get(name)
    if definition is None:
        raise ValidationError(
            "collection", f"unknown collection, expected one of {sorted(COLLECTIONS)}", name
        )
    return definition


def _key_from(definition: CollectionDef, key: dict[str, Any]) -> tuple[Any, ...]:
    missing = [f for f in definition.key_fields if f not in key]
    if missing:
        raise ValidationError("key", f"missing key fields {missing} for {definition.name}", key)
    return tuple(
        normalize(v) if isinstance(v, str) else v for v in (key[f] for f in definition.key_fields)
    )


def _guard_cost_inputs(existing: BrewHeader, updated: BrewHeader) -> None:
    if not existing.cost_analysis_closed:
        return
    if any(getattr(existing, f) != getattr(updated, f) for f in COST_INPUT_FIELDS):
        raise CostAnalysisClosedError(existing.lot)
    if not updated.cost_analysis_closed:
        raise CostAnalysisClosedError(existing.lot)


class CollectionRecordsUseCase:
    """Record-level edits of master data and other keyed collections."""

    def __init__(self, gateway: YearDatasetGateway | None = None):
        self._gateway = gateway

    async def _get_gateway(self) -> YearDatasetGateway:
        if self._gateway is None:
            from brewledger.application.services import get_dataset_gateway

            self._gateway = await get_dataset_gateway()
        return self._gateway

    async def records(self, year: str, collection: str) -> list[LedgerModel]:
        definition = _collection(collection)
        gateway = await self._get_gateway()
        return list(getattr(await gateway.load(year), definition.attribute))

    async def upsert(
        self, year: str, collection: str, record: dict[str, Any] | LedgerModel
    ) -> LedgerModel:
        """Insert a record, or replace the record with the same key."""
        definition = _collection(collection)
        if isinstance(record, LedgerModel):
            record = record.model_dump()
        try:
            item = definition.model.model_validate(record)
        except PydanticValidationError as e:
            first = e.errors()[0]
            field = ".".join(str(part) for part in first["loc"])
            raise ValidationError(field, first["msg"], first.get("input")) from e

        key = definition.key_of(item)
        gateway = await self._get_gateway()
        async with gateway.edit(year, f"upsert_{definition.name.lower()}") as data:
            records = getattr(data, definition.attribute)
            for index, existing in enumerate(records):
                if definition.key_of(existing) == key:
                    if isinstance(existing, BrewHeader):
                        _guard_cost_inputs(existing, item)
                    records[index] = item
                    replaced = True
                    break
            else:
                records.append(item)
                replaced = False

        logger.info(
            "collection_record_saved",
            year=year,
            collection=definition.name,
            key=list(key),
            replaced=replaced,
        )
        return item

    async def delete(self, year: str, collection: str, key: dict[str, Any]) -> LedgerModel:
        """Remove the record with ``key``; raises when there is none."""
        definition = _collection(collection)
        wanted = _key_from(definition, key)
        gateway = await self._get_gateway()
        async with gateway.edit(year, f"delete_{definition.name.lower()}") as data:
            records = getattr(data, definition.attribute)
            index = next(
                (i for i, r in enumerate(records) if definition.key_of(r) == wanted), None
            )
            if index is None:
                raise RecordNotFoundError(
                    definition.name, "/".join(definition.key_fields), "/".join(map(str, wanted))
                )
            removed = records.pop(index)

        logger.info(
            "collection_record_deleted", year=year, collection=definition.name, key=list(wanted)
        )
        return removed

    async def replace_coefficients(
        self, year: str, coefficients: CostCoefficients | dict[str, Any]
    ) -> CostCoefficients:
        """Replace the cost coefficients of a year as a whole."""
        if not isinstance(coefficients, CostCoefficients):
            try:
                coefficients = CostCoefficients.model_validate(coefficients)
            except PydanticValidationError as e:
                first = e.errors()[0]
                raise ValidationError(
                    ".".join(str(part) for part in first["loc"]), first["msg"]
                ) from e

        gateway = await self._get_gateway()
        async with gateway.edit(year, "replace_cost_coefficients") as data:
            data.cost_coefficients = coefficients

        logger.info("cost_coefficients_replaced", year=year)
        return coefficients
