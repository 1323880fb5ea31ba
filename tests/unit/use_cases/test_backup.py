"""Unit tests for backup export, import and reset."""

import json

import pytest

from brewledger.application.use_cases.backup import BackupUseCase, parse_backup
from brewledger.core.entities import YearDataset
from brewledger.core.exceptions import ImportFormatError


@pytest.fixture
def use_case(seeded_gateway) -> BackupUseCase:
    return BackupUseCase(gateway=seeded_gateway)


class TestParseBackup:
    def test_accepts_text_and_objects(self, brewery_year):
        document = {"2024": brewery_year.to_document(), "2023": {}}

        from_text = parse_backup(json.dumps(document))
        from_dict = parse_backup(document)

        assert from_text == from_dict
        assert from_text["2024"] == brewery_year
        assert from_text["2023"] == YearDataset()

    @pytest.mark.parametrize(
        "payload",
        [
            "{not json",
            "[]",
            '{"latest": {}}',
            '{"24": {}}',
            '{"2024": []}',
            '{"2024": {"MOVIMENTAZIONE": [{"DATA": "31/02/2024"}]}}',
        ],
    )
    def test_rejects_malformed_backups(self, payload):
        with pytest.raises(ImportFormatError):
            parse_backup(payload)

    def test_reports_failing_year(self):
        with pytest.raises(ImportFormatError) as exc_info:
            parse_backup({"2023": {}, "2024": {"CLIENTI": "none"}})
        assert exc_info.value.details["key"] == "2024"


class TestImportExport:
    async def test_round_trip(self, use_case, seeded_gateway):
        await seeded_gateway.create("2023", YearDataset())
        original = {year: await seeded_gateway.load(year) for year in ("2023", "2024")}
        exported = await use_case.export_json()

        await use_case.reset()
        assert await seeded_gateway.list_years() == []

        assert await use_case.import_all(exported) == ["2023", "2024"]
        for year, dataset in original.items():
            assert await seeded_gateway.load(year) == dataset

    async def test_export_uses_document_keys(self, use_case):
        backup = await use_case.export_all()
        assert list(backup) == ["2024"]
        assert backup["2024"]["MOVIMENTAZIONE"][0]["DATA"] == "05/01/2024"

    async def test_import_replaces_without_merge(self, use_case, seeded_gateway):
        await use_case.import_all({"2020": {}})
        assert await seeded_gateway.list_years() == ["2020"]

    async def test_invalid_import_leaves_store(self, use_case, seeded_gateway, store):
        with pytest.raises(ImportFormatError):
            await use_case.import_all('{"2020": {}, "bad": {}}')

        assert await seeded_gateway.list_years() == ["2024"]
        assert store.puts == 1
