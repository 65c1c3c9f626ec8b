"""
Pytest Configuration and Fixtures.
Shared builders for RIPS-shaped invoices and validator components.
"""

from typing import Any, Dict, List, Optional

import pytest

from rips_validator.models.invoice import Invoice
from rips_validator.persistence.report_store import ReportStore
from rips_validator.validation.rule_loader import RuleLoader
from rips_validator.validation.validation_engine import InvoiceValidator


def consulta(**overrides: Any) -> Dict[str, Any]:
    """A consultation line that passes every rule for an adult CC patient."""
    line = {
        "codPrestador": "050010000001",
        "fechaInicioAtencion": "2025-04-22 13:57",
        "numAutorizacion": None,
        "codConsulta": "890201",
        "modalidadGrupoServicioTecSal": "01",
        "grupoServicios": "01",
        "codServicio": 325,
        "finalidadTecnologiaSalud": "11",
        "causaMotivoAtencion": "38",
        "codDiagnosticoPrincipal": "Z000",
        "codDiagnosticoRelacionado1": None,
        "codDiagnosticoRelacionado2": None,
        "tipoDiagnosticoPrincipal": "01",
        "tipoDocumentoIdentificacion": "CC",
        "numDocumentoIdentificacion": "1017000000",
        "vrServicio": 45000,
        "conceptoRecaudo": "05",
        "valorPagoModerador": 0,
        "consecutivo": 1,
    }
    line.update(overrides)
    return line


def procedimiento(**overrides: Any) -> Dict[str, Any]:
    """A procedure line that passes every rule for an adult CC patient."""
    line = {
        "codPrestador": "050010000001",
        "fechaInicioAtencion": "2025-04-22 14:10",
        "codProcedimiento": "903841",
        "viaIngresoServicioSalud": "01",
        "modalidadGrupoServicioTecSal": "01",
        "grupoServicios": "02",
        "codServicio": 706,
        "finalidadTecnologiaSalud": "15",
        "tipoDocumentoIdentificacion": "CC",
        "numDocumentoIdentificacion": "1017000000",
        "codDiagnosticoPrincipal": "Z000",
        "vrServicio": 12000,
        "conceptoRecaudo": "05",
        "valorPagoModerador": 0,
        "consecutivo": 1,
    }
    line.update(overrides)
    return line


def usuario(
    consultas: Optional[List[Dict[str, Any]]] = None,
    procedimientos: Optional[List[Dict[str, Any]]] = None,
    with_services: bool = True,
    **overrides: Any
) -> Dict[str, Any]:
    """An adult CC patient with the given service lines."""
    patient = {
        "tipoDocumentoIdentificacion": "CC",
        "numDocumentoIdentificacion": "1017000000",
        "tipoUsuario": "01",
        "fechaNacimiento": "1985-06-10",
        "codSexo": "F",
        "codPaisResidencia": "170",
        "codMunicipioResidencia": "05001",
        "codZonaTerritorialResidencia": "02",
        "incapacidad": "NO",
        "consecutivo": 1,
        "codPaisOrigen": "170",
    }
    if with_services:
        patient["servicios"] = {
            "consultas": consultas if consultas is not None else [],
            "procedimientos": procedimientos if procedimientos is not None else [],
        }
    patient.update(overrides)
    return patient


def factura(usuarios: Optional[List[Dict[str, Any]]] = None, **overrides: Any) -> Dict[str, Any]:
    """Invoice payload as posted by a provider."""
    invoice = {
        "numDocumentoIdObligado": "900123456",
        "numFactura": "FE1234",
        "tipoNota": None,
        "numNota": None,
        "usuarios": usuarios,
    }
    invoice.update(overrides)
    return invoice


@pytest.fixture
def build_invoice():
    """Build an Invoice model from RIPS-shaped dicts."""
    def _build(usuarios: Optional[List[Dict[str, Any]]] = None, **overrides: Any) -> Invoice:
        return Invoice.model_validate(factura(usuarios, **overrides))
    return _build


@pytest.fixture
def rule_loader():
    """RuleLoader reading the bundled reference file."""
    return RuleLoader()


@pytest.fixture
def engine(rule_loader):
    """A fresh InvoiceValidator on the bundled reference file."""
    return InvoiceValidator(rule_loader=rule_loader)


@pytest.fixture
def report_store(tmp_path):
    """ReportStore writing into a temporary directory."""
    return ReportStore(report_dir=str(tmp_path / "reportes"), write_to_disk=True)


# Configure pytest markers
def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )
