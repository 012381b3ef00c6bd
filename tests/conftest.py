import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from config import ConfigurationManager


SAMPLE_INVOICE = """SZÁMLA
Szállító:
Teszt Kft.
1234 Budapest, Fő utca 1.
Számla sorszáma: TK-2024/0042
Bankszámlaszám: 12345678-87654321
Számla kelte: 2024.03.15
Fizetési határidő: 2024.03.30
Fizetési mód: Banki átutalás
Megnevezés
Irodaszer beszerzés
Összesen: 125 000 Ft
"""


@pytest.fixture(autouse=True)
def fresh_config():
    ConfigurationManager.reset()
    yield
    ConfigurationManager.reset()


@pytest.fixture
def sample_invoice_text():
    return SAMPLE_INVOICE
