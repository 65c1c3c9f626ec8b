# rips_validator/api/routers/factura_router.py
from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response

from rips_validator.config.constants import RuleProfile
from rips_validator.models.invoice import Invoice
from rips_validator.models.validation_result import ValidationReport
from rips_validator.persistence.report_store import ReportStore, get_report_store
from rips_validator.utils.reporting import get_report_renderer, report_filename
from rips_validator.validation.validation_engine import InvoiceValidator, get_validation_engine

router = APIRouter(prefix="/api/factura", tags=["Validación de facturas"])

TEXT_MEDIA_TYPE = "text/plain; charset=utf-8"


def _report_response(text: str, invoice_number: str) -> Response:
    return Response(
        content=text,
        media_type=TEXT_MEDIA_TYPE,
        headers={
            "Content-Disposition": f'attachment; filename="{report_filename(invoice_number)}"'
        },
    )


def _validate(
    factura: Invoice,
    profile: RuleProfile,
    engine: InvoiceValidator,
    store: ReportStore
) -> Response:
    report: ValidationReport = engine.validate(factura, profile)
    report = store.publish(report)
    text = get_report_renderer().render_text(report)
    return _report_response(text, report.invoice_number)


@router.post("/validar", summary="Validar una factura con todas las reglas")
def validar(
    factura: Invoice,
    engine: InvoiceValidator = Depends(get_validation_engine),
    store: ReportStore = Depends(get_report_store)
):
    """
    Valida la factura completa y devuelve el reporte de hallazgos como
    archivo de texto. Un reporte sin líneas después del separador indica
    que la factura pasó la validación.
    """
    return _validate(factura, RuleProfile.COMPLETO, engine, store)


@router.post("/validar_pyp", summary="Validar una factura de promoción y prevención")
def validar_pyp(
    factura: Invoice,
    engine: InvoiceValidator = Depends(get_validation_engine),
    store: ReportStore = Depends(get_report_store)
):
    return _validate(factura, RuleProfile.PYP, engine, store)


@router.post("/validar_morb", summary="Validar una factura de morbilidad")
def validar_morb(
    factura: Invoice,
    engine: InvoiceValidator = Depends(get_validation_engine),
    store: ReportStore = Depends(get_report_store)
):
    """Morbilidad: solo duplicados y tipo de documento según edad."""
    return _validate(factura, RuleProfile.MORB, engine, store)


@router.get("/descargar/{num_factura}", summary="Descargar el último reporte de una factura")
def descargar(num_factura: str, store: ReportStore = Depends(get_report_store)):
    text = store.get(num_factura)
    if text is None:
        raise HTTPException(status_code=404, detail="No se encontraron errores para esta factura.")
    return _report_response(text, num_factura)
