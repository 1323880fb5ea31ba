"""Backup Use Case: whole-store export, import and factory reset."""

import json
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from brewledger.application.gateway import YearDatasetGateway
from brewledger.config import get_logger
from brewledger.core.entities.dataset import YearDataset
from brewledger.core.exceptions import ImportFormatError
from brewledger.core.values import is_year_key

logger = get_logger(__name__)


def parse_backup(payload: str | bytes | dict[str, Any]) -> dict[str, YearDataset]:
    """
    Validate a bulk backup in full.

    The payload is a JSON object mapping 4-digit years to year documents.
    Raises ``ImportFormatError`` on the first problem found.
    """
    if isinstance(payload, (str, bytes)):
        try:
            payload = json.loads(payload)
        except json.JSONDecodeError as e:
            raise ImportFormatError(f"malformed JSON ({e.msg} at line {e.lineno})") from e

    if not isinstance(payload, dict):
        raise ImportFormatError("top level must be an object keyed by year")

    datasets = {}
    for key, document in payload.items():
        if not is_year_key(key):
            raise ImportFormatError(f"key {key!r} is not a 4-digit year", key=str(key))
        if not isinstance(document, dict):
            raise ImportFormatError(f"year {key} is not an object", key=key)
        try:
            datasets[key] = YearDataset.model_validate(document)
        except PydanticValidationError as e:
            first = e.errors()[0]
            location = ".".join(str(part) for part in first["loc"])
            raise ImportFormatError(
                f"year {key}: {location}: {first['msg']}", key=key
            ) from e
    return datasets


class BackupUseCase:
    """Export and replace the whole store."""

    def __init__(self, gateway: YearDatasetGateway | None = None):
        self._gateway = gateway

    async def _get_gateway(self) -> YearDatasetGateway:
        if self._gateway is None:
            from brewledger.application.services import get_dataset_gateway

            self._gateway = await get_dataset_gateway()
        return self._gateway

    async def export_all(self) -> dict[str, dict[str, Any]]:
        """Every year as a stored document, keyed by year."""
        gateway = await self._get_gateway()
        backup = {}
        for year in await gateway.list_years():
            backup[year] = (await gateway.load(year)).to_document()
        logger.info("backup_exported", years=len(backup))
        return backup

    async def export_json(self) -> str:
        return json.dumps(await self.export_all(), ensure_ascii=False, indent=2)

    async def import_all(self, payload: str | bytes | dict[str, Any]) -> list[str]:
        """
        Replace the store with a backup.

        Nothing is written unless the entire payload validates; there is no
        merge with the years already stored.
        """
        datasets = parse_backup(payload)
        gateway = await self._get_gateway()
        await gateway.replace_all(datasets)
        logger.info("backup_imported", years=sorted(datasets))
        return sorted(datasets)

    async def reset(self) -> None:
        """Delete every year."""
        gateway = await self._get_gateway()
        await gateway.clear_all()
        logger.warning("store_reset")
