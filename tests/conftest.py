"""
Pytest configuration and shared fixtures for trade-recon tests
"""

import logging
import sys
from pathlib import Path

import pytest

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))


EXPORT_HEADER = (
    "Account,Date/Time,Symbol,Description,Symbol type,Side,Order type,Quantity,Price,"
    "Gross P/L,Fee,Net P/L,Trade ID,Order ID,Position ID,Comment"
)

# One round trip (two legs sharing Position ID P1) and one single-leg trade
SAMPLE_EXPORT = "\n".join([
    EXPORT_HEADER,
    '"FFN-25S951058292787 LilDee249",5/3/2024 9:30:05 AM,MNQM4,Micro Nasdaq,Futures,Buy,Market,2,'
    '"18,000.25",0.00,1.24,-1.24,T1,O1,P1,',
    '"FFN-25S951058292787 LilDee249",5/3/2024 9:45:10 AM,MNQM4,Micro Nasdaq,Futures,Sell,Limit,-2,'
    '"18,010.75",42.00,1.24,40.76,T2,O2,P1,"target hit, scaled"',
    'FFN-25S951058292787,5/3/2024 10:02:00 AM,MESM4,Micro S&P,Futures,Sell,Market,1,'
    '5100.00,-12.50,0.62,-13.12,,O3,,',
]) + "\n"


@pytest.fixture
def write_export(tmp_path):
    """Write export text to a temporary CSV file and return its path"""
    def _write(content: str, name: str = "export.csv") -> Path:
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return path
    return _write


@pytest.fixture
def export_header():
    return EXPORT_HEADER


@pytest.fixture
def sample_export(write_export):
    """Sample export file with two trades"""
    return write_export(SAMPLE_EXPORT)


@pytest.fixture
def temp_db(tmp_path):
    """Path for a temporary journal database"""
    return str(tmp_path / "journal.duckdb")


@pytest.fixture(autouse=True)
def reset_package_logging():
    """Drop handlers the CLI installs so later tests never write to closed streams"""
    yield
    package_logger = logging.getLogger('trade_recon')
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
    package_logger.propagate = True
    package_logger.setLevel(logging.NOTSET)


# Pytest markers and configuration
def pytest_configure(config):
    """Configure pytest markers"""
    config.addinivalue_line(
        "markers", "unit: mark test as unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as integration test"
    )


def pytest_collection_modifyitems(config, items):
    """Modify test collection to add default markers"""
    for item in items:
        if "integration" not in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        else:
            item.add_marker(pytest.mark.integration)
