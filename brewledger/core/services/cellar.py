"""Cellar helpers: fermentation days, fermenter occupancy and batch inputs."""

from collections.abc import Iterable
from datetime import date, timedelta
from decimal import Decimal

from brewledger.core.entities.batch import BrewHeader
from brewledger.core.entities.dataset import YearDataset
from brewledger.core.entities.master_data import FermenterConfig
from brewledger.core.entities.movement import Movement
from brewledger.core.exceptions import (
    BatchClosedError,
    CostAnalysisClosedError,
    ValidationError,
)


def fermentation_day(production_date: date, measured_on: date) -> int:
    """Whole days elapsed since production; day 0 is the brew day."""
    days = (measured_on - production_date).days
    if days < 0:
        raise ValidationError(
            "measured_on",
            f"measurement date precedes production date {production_date:%d/%m/%Y}",
            measured_on,
        )
    return days


def expected_packaging_date(header: BrewHeader) -> date | None:
    if header.expected_fermentation_days is None:
        return None
    return header.production_date + timedelta(days=header.expected_fermentation_days)


def occupied_fermenters(dataset: YearDataset, exclude_lot: str | None = None) -> set[str]:
    """
    Fermenters held by an open batch.

    A batch holds its fermenter until it is closed or until its packaged
    liters reach its final liters.
    """
    packaged: dict[str, Decimal] = {}
    for event in dataset.packaging:
        lot = event.production_lot.strip().upper()
        packaged[lot] = packaged.get(lot, Decimal(0)) + event.total_liters

    occupied = set()
    for header in dataset.brew_headers:
        if header.is_closed or header.lot == (exclude_lot or "").strip().upper():
            continue
        final_liters = header.final_liters or Decimal(0)
        if final_liters > 0 and packaged.get(header.lot, Decimal(0)) < final_liters:
            occupied.add(header.fermenter)
    return occupied


def available_fermenters(
    dataset: YearDataset, exclude_lot: str | None = None
) -> list[FermenterConfig]:
    """Configured fermenters not held by another open batch."""
    occupied = occupied_fermenters(dataset, exclude_lot)
    return [f for f in dataset.fermenters if f.name not in occupied]


def check_batch_inputs(
    dataset: YearDataset,
    changed: Iterable[Movement],
    consumed: Iterable[Movement] = (),
) -> None:
    """
    Refuse movement changes charged to a batch that no longer takes them.

    Any movement in ``changed`` whose production lot has a closed cost
    analysis raises ``CostAnalysisClosedError``. Outbound movements in
    ``consumed`` are new draws and also fail on a batch whose fermenter has
    been released.
    """
    for movement in changed:
        header = dataset.find_batch(movement.production_lot) if movement.production_lot else None
        if header is not None and header.cost_analysis_closed:
            raise CostAnalysisClosedError(header.lot)
    for movement in consumed:
        if not movement.is_outbound or not movement.production_lot:
            continue
        header = dataset.find_batch(movement.production_lot)
        if header is not None and header.is_closed:
            raise BatchClosedError(header.lot, "fermenter already released")
