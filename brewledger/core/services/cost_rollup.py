"""
Cost rollup for production batches and quotes.

Joins consumed quantities against the price catalog and applies the fixed
coefficients of the year. A product missing from the catalog is costed at zero
and reported in ``missing_prices`` so the analysis is never silently short.
"""

from collections.abc import Iterable
from decimal import Decimal

from brewledger.config import get_logger
from brewledger.core.constants import (
    CAP_NAME_MARKER,
    INGREDIENT_CATEGORIES,
    UNKNOWN,
    get_packaging_format,
)
from brewledger.core.entities.costing import (
    BottleCost,
    CategoryCost,
    CostAnalysis,
    CostOptions,
    KegCost,
    OverheadCosts,
    RawMaterialCostLine,
)
from brewledger.core.entities.dataset import YearDataset
from brewledger.core.entities.master_data import CostCoefficients, Quote
from brewledger.core.entities.warehouse import PriceCatalogEntry
from brewledger.core.exceptions import BatchNotFoundError
from brewledger.core.services.price_catalog import latest_by_name, lookup
from brewledger.core.services.warehouse_projection import project
from brewledger.core.values import normalize

logger = get_logger(__name__)

ZERO = Decimal(0)
HUNDRED = Decimal(100)


def _product_label(name: str, brand: str, supplier: str) -> str:
    return " / ".join(part for part in (name, brand, supplier) if part)


def _group_by_category(lines: list[RawMaterialCostLine]) -> list[CategoryCost]:
    groups: dict[str, CategoryCost] = {}
    for line in lines:
        group = groups.setdefault(line.category, CategoryCost(category=line.category))
        group.lines.append(line)
        group.total += line.total
    return [groups[name] for name in sorted(groups)]


def _overheads(
    coefficients: CostCoefficients,
    *,
    gas_used: Decimal,
    gas_type: str,
    use_co2: bool,
    use_nitrogen: bool,
    plato: Decimal,
    liters: Decimal,
    use_storage: bool,
    pallet_count: int,
) -> OverheadCosts:
    gas = gas_used * coefficients.gas_price(gas_type)
    additional = ZERO
    if use_co2:
        additional += coefficients.rate("co2_cost")
    if use_nitrogen:
        additional += coefficients.rate("nitrogen_cost")
    excise = plato * (liters / HUNDRED) * coefficients.rate("excise_coefficient")
    storage = coefficients.rate("storage_fee") if use_storage else ZERO
    pallets = pallet_count * coefficients.rate("pallet_cost")
    management = liters * coefficients.rate("management_fee_per_liter")
    return OverheadCosts(
        gas_used=gas_used,
        gas=gas,
        additional_gases=additional,
        excise=excise,
        storage=storage,
        pallets=pallets,
        management=management,
        total=gas + additional + excise + storage + pallets + management,
    )


def _catalog_price(
    catalog: list[PriceCatalogEntry], name: str, missing: list[str], contains: bool = False
) -> tuple[Decimal, bool]:
    entry = latest_by_name(catalog, name, contains=contains)
    if entry is None:
        if name not in missing:
            missing.append(name)
        return ZERO, False
    return entry.price, True


def _packaging_breakdown(
    catalog: list[PriceCatalogEntry],
    coefficients: CostCoefficients,
    cost_per_liter: Decimal,
    units_by_format: Iterable[tuple[str, int]],
    use_labels: bool,
    missing: list[str],
) -> tuple[list[KegCost], list[BottleCost]]:
    kegs: list[KegCost] = []
    bottles: list[BottleCost] = []
    cap_cost: Decimal | None = None

    for format_code, units in units_by_format:
        fmt = get_packaging_format(format_code)
        if fmt is None or fmt.liters_per_unit <= 0:
            logger.warning("unknown_packaging_format", format_code=format_code)
            continue

        if fmt.is_keg:
            if fmt.is_steel_keg:
                container, found = coefficients.rate("steel_keg_wash_cost"), True
            else:
                container, found = _catalog_price(catalog, fmt.container_name, missing)
            per_liter = container / fmt.liters_per_unit
            kegs.append(
                KegCost(
                    format_code=fmt.code,
                    beer_cost_per_liter=cost_per_liter,
                    container_cost_per_liter=per_liter,
                    final_price_per_liter=cost_per_liter + per_liter,
                    container_price_found=found,
                )
            )
        elif fmt.is_bottle:
            if units <= 0:
                continue
            if cap_cost is None:
                cap_cost, _ = _catalog_price(catalog, CAP_NAME_MARKER, missing, contains=True)
            beer = cost_per_liter * fmt.liters_per_unit
            bottle, _ = _catalog_price(catalog, fmt.container_name, missing)
            carton_share = ZERO
            if fmt.carton_name and fmt.units_per_carton > 0:
                carton, _ = _catalog_price(catalog, fmt.carton_name, missing)
                carton_share = carton / fmt.units_per_carton
            label = coefficients.rate("label_cost") if use_labels else ZERO
            final = beer + bottle + cap_cost + carton_share + label
            bottles.append(
                BottleCost(
                    format_code=fmt.code,
                    total_bottles=units,
                    beer_cost=beer,
                    bottle_cost=bottle,
                    cap_cost=cap_cost,
                    carton_cost_per_bottle=carton_share,
                    label_cost=label,
                    final_price_per_bottle=final,
                    total_cost=final * units,
                )
            )
    return kegs, bottles


def _summarise(
    subject: str,
    lines: list[RawMaterialCostLine],
    overheads: OverheadCosts,
    liters: Decimal,
    missing: list[str],
) -> CostAnalysis:
    raw_total = sum((line.total for line in lines), ZERO)
    grand_total = raw_total + overheads.total
    return CostAnalysis(
        subject=subject,
        raw_materials=_group_by_category(lines),
        raw_materials_total=raw_total,
        overheads=overheads,
        total_liters=liters,
        grand_total=grand_total,
        cost_per_liter=grand_total / liters if liters > 0 else ZERO,
        missing_prices=missing,
    )


def analyse_batch(
    dataset: YearDataset, lot: str, options: CostOptions | None = None
) -> CostAnalysis:
    """
    Cost of a production lot.

    Raw materials are the ingredient movements consumed by the lot. Options
    default to the working state saved on the batch header.
    """
    header = dataset.find_batch(lot)
    if header is None:
        raise BatchNotFoundError(lot)
    if options is None:
        options = CostOptions(
            gas_type=header.cost_gas_type,
            use_storage=header.cost_use_storage,
            pallet_count=header.cost_pallet_count,
            use_labels=header.cost_use_labels,
        )

    missing: list[str] = []
    lines: list[RawMaterialCostLine] = []
    for movement in dataset.movements:
        if (
            normalize(movement.production_lot) != header.lot
            or not movement.is_outbound
            or movement.category.value not in INGREDIENT_CATEGORIES
        ):
            continue
        quantity = -movement.quantity
        entry = lookup(dataset.price_catalog, movement.name, movement.brand, movement.supplier)
        price = entry.price if entry is not None else ZERO
        if entry is None:
            label = _product_label(*movement.price_key)
            if label not in missing:
                missing.append(label)
        lines.append(
            RawMaterialCostLine(
                category=movement.category.value,
                name=movement.name,
                brand=movement.brand,
                supplier=movement.supplier,
                quantity=quantity,
                unit_price=price,
                total=quantity * price,
                price_found=entry is not None,
            )
        )

    packaging = dataset.packaging_for(header.lot)
    liters = sum((event.total_liters for event in packaging), ZERO)
    overheads = _overheads(
        dataset.cost_coefficients,
        gas_used=header.brew_gas + header.packaging_gas,
        gas_type=options.gas_type,
        use_co2=header.use_co2,
        use_nitrogen=header.use_nitrogen,
        plato=header.initial_plato or ZERO,
        liters=liters,
        use_storage=options.use_storage,
        pallet_count=options.pallet_count,
    )
    analysis = _summarise(header.lot, lines, overheads, liters, missing)

    units: dict[str, int] = {}
    for event in packaging:
        units[event.format_code] = units.get(event.format_code, 0) + event.units
    analysis.kegs, analysis.bottles = _packaging_breakdown(
        dataset.price_catalog,
        dataset.cost_coefficients,
        analysis.cost_per_liter,
        units.items(),
        options.use_labels,
        missing,
    )
    analysis.closed = header.cost_analysis_closed
    analysis.missing_prices = missing
    return analysis


def analyse_quote(dataset: YearDataset, quote: Quote) -> CostAnalysis:
    """Estimated cost of a quote, priced with the catalog of ``dataset``."""
    categories = {
        (product.name, product.brand): product.category
        for product in project(dataset.movements).catalog
    }

    missing: list[str] = []
    lines: list[RawMaterialCostLine] = []
    for ingredient in quote.ingredients:
        key = ingredient.price_key
        quantity = ingredient.quantity or ZERO
        if key is None or quantity <= 0:
            continue
        name, brand, supplier = (normalize(part) for part in key)
        entry = lookup(dataset.price_catalog, name, brand, supplier)
        price = entry.price if entry is not None else ZERO
        if entry is None:
            label = _product_label(name, brand, supplier)
            if label not in missing:
                missing.append(label)
        lines.append(
            RawMaterialCostLine(
                category=categories.get((name, brand), UNKNOWN),
                name=name,
                brand=brand,
                supplier=supplier,
                quantity=quantity,
                unit_price=price,
                total=quantity * price,
                price_found=entry is not None,
            )
        )

    liters = ZERO
    for line in quote.packaging:
        fmt = get_packaging_format(line.format_code)
        if fmt is not None and line.quantity > 0:
            liters += line.quantity * fmt.liters_per_unit

    overheads = _overheads(
        dataset.cost_coefficients,
        gas_used=quote.gas_used or ZERO,
        gas_type=quote.gas_type,
        use_co2=quote.use_co2,
        use_nitrogen=quote.use_nitrogen,
        plato=quote.plato or ZERO,
        liters=liters,
        use_storage=quote.use_storage,
        pallet_count=quote.pallet_count,
    )
    analysis = _summarise(quote.id, lines, overheads, liters, missing)
    if analysis.cost_per_liter > 0:
        analysis.kegs, analysis.bottles = _packaging_breakdown(
            dataset.price_catalog,
            dataset.cost_coefficients,
            analysis.cost_per_liter,
            [(line.format_code, line.quantity) for line in quote.packaging if line.quantity > 0],
            quote.use_labels,
            missing,
        )
        analysis.missing_prices = missing
    return analysis
