from types import MappingProxyType

from core.models import Standard
from standards.iec_tables import IEC_TABLE
from standards.nec_tables import NEC_TABLE
from standards.tables import StandardsTable

# Built once at import; read-only afterwards, shared without locking.
TABLES = MappingProxyType({
    Standard.NEC: NEC_TABLE,
    Standard.IEC: IEC_TABLE,
})


def get_table(standard: Standard) -> StandardsTable:
    return TABLES[standard]
