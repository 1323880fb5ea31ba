"""Static tables and document markers shared by the ledger."""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum


class ProductCategory(str, Enum):
    """Raw-material categories."""

    MALTI = "MALTI"
    LUPPOLI = "LUPPOLI"
    LIEVITI = "LIEVITI"
    ADDITIVI = "ADDITIVI"
    SANIFICANTI = "SANIFICANTI"
    TAPPI = "TAPPI"
    FUSTI = "FUSTI"
    CARTONI = "CARTONI"
    BOTTIGLIE = "BOTTIGLIE"


INGREDIENT_CATEGORIES: frozenset[str] = frozenset(
    {
        ProductCategory.MALTI.value,
        ProductCategory.LUPPOLI.value,
        ProductCategory.LIEVITI.value,
        ProductCategory.ADDITIVI.value,
        ProductCategory.SANIFICANTI.value,
    }
)


@dataclass(frozen=True)
class PackagingFormat:
    """One finished-beer format and the warehouse materials it consumes."""

    code: str
    units_per_carton: int
    liters_per_unit: Decimal
    container_name: str
    carton_name: str | None = None

    @property
    def is_bottle(self) -> bool:
        return "BOTT" in self.code

    @property
    def is_keg(self) -> bool:
        return "FUSTO" in self.code or "KEG" in self.code

    @property
    def is_steel_keg(self) -> bool:
        return "ACCIAIO" in self.code

    @property
    def container_category(self) -> str:
        if "BOTTIGLIA" in self.container_name:
            return ProductCategory.BOTTIGLIE.value
        return ProductCategory.FUSTI.value


def _keg(code: str, liters: str) -> PackagingFormat:
    return PackagingFormat(
        code=code,
        units_per_carton=1,
        liters_per_unit=Decimal(liters),
        container_name=code,
    )


PACKAGING_FORMATS: dict[str, PackagingFormat] = {
    fmt.code: fmt
    for fmt in (
        PackagingFormat("BOTT. 33CL", 24, Decimal("0.33"), "BOTTIGLIA 33CL", "CARTONE X 33CL"),
        PackagingFormat("BOTT. 50CL", 15, Decimal("0.50"), "BOTTIGLIA 50CL", "CARTONE X 50CL"),
        PackagingFormat("BOTT. 75CL", 6, Decimal("0.75"), "BOTTIGLIA 75CL", "CARTONE X 75CL"),
        _keg("FUSTO ACCIAIO 20L", "20.0"),
        _keg("FUSTO ACCIAIO 24L", "24.0"),
        _keg("FUSTO ACCIAIO 30L", "30.0"),
        _keg("KEYKEG 20L", "20.0"),
        _keg("KEYKEG 30L", "30.0"),
        _keg("FUSTO POLYKEG 20LT", "20.0"),
        _keg("FUSTO POLYKEG 24LT", "24.0"),
        _keg("FUSTO POLYKEG 20LT CON SACCA", "20.0"),
        _keg("FUSTO POLYKEG 24LT CON SACCA", "24.0"),
    )
}

CAP_NAME_MARKER = "TAPPO CORONA"

# Document markers written into movement references
CARRY_FORWARD_INVOICE = "RIPORTO_ANNO_PREC"
AUTO_DISCHARGE_PREFIX = "SCADENZA_AUTO_"
PAST_EXPIRY_NOTE = "OLTRE LA DATA DI SCADENZA"
GENERIC_DISCHARGE_PREFIX = "SCARICO_GENERICO_"
GENERIC_DISCHARGE_NOTE = "SCARICO GENERICO"
PACKAGING_OPERATION_PREFIX = "CONF_"
INVENTORY_CHECK_PREFIX = "INV_"
INVENTORY_DOC_PREFIX = "INVENTORY_"
SALES_ORDER_PREFIX = "ORD_"

# Placeholder for brand/supplier of a lot with no inbound movement
UNKNOWN = "N/D"


def get_packaging_format(code: str) -> PackagingFormat | None:
    """Look up a packaging format by its code."""
    return PACKAGING_FORMATS.get(code.strip().upper())
