"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from decimal import Decimal

DEFAULT_DAYS_IN_PERIOD = 28
DEFAULT_LATE_PENALTY = Decimal("5.00")

AFP_RATE = Decimal("0.117")
ONP_RATE = Decimal("0.13")

MONTH_MARKER = "MES DE"
NO_MONTH_LABEL = "SIN MES"
HEADER_FIRST_CELL = "Codigo"
DAY_HEADER_PREFIX = "Dia"
MONTH_SCAN_ROWS = 5

# Fixed column positions of a data row.
COL_CODE = 0
COL_NAME = 1
COL_NATIONAL_ID = 2
COL_OCCUPATION = 3
COL_MONTHLY_SALARY = 4
COL_DAILY_SALARY = 5
COL_FIRST_DAY = 6

ALL_MONTHS = "TODOS"
NO_BUSINESS_LINE = "Sin Rubro"
NO_OCCUPATION = "Sin Especificar"

GROUP_PALETTE = (
    "#3B82F6",
    "#10B981",
    "#F59E0B",
    "#EF4444",
    "#8B5CF6",
    "#EC4899",
    "#14B8A6",
    "#F97316",
)

DEFAULT_LOOKUP_TIMEOUT_SECONDS = 5.0
DEFAULT_LOOKUP_WORKERS = 4

EXPORT_FILE_PREFIX = "Planilla_Consolidada"
CURRENCY_SYMBOL = "S/"
