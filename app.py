"""
RIPS Invoice Validator - Review App

Small web app for billing staff to check a RIPS invoice before submitting it.
Upload the invoice JSON, pick the rule profile and read the findings.

Run: streamlit run app.py
"""

import json
import time

import streamlit as st
from pydantic import ValidationError

from rips_validator.config.constants import RuleProfile
from rips_validator.models.invoice import Invoice
from rips_validator.persistence.report_store import get_report_store
from rips_validator.utils.error_handler import ErrorCode
from rips_validator.utils.reporting import get_report_renderer, report_filename
from rips_validator.validation.validation_engine import get_validation_engine

# ==============================================================================
# PAGE CONFIGURATION
# ==============================================================================

st.set_page_config(
    page_title="Validador RIPS",
    page_icon="🩺",
    layout="wide",
    initial_sidebar_state="collapsed"
)

PROFILE_LABELS = {
    RuleProfile.COMPLETO: "Completo (todas las reglas)",
    RuleProfile.PYP: "Promoción y prevención",
    RuleProfile.MORB: "Morbilidad (duplicados y documento)",
}

# ==============================================================================
# HELPER FUNCTIONS
# ==============================================================================


def process_invoice(raw_bytes: bytes, profile: RuleProfile) -> dict:
    """
    Parse and validate an uploaded invoice.

    Returns:
        dict: status, report, report text and timing
    """
    result = {
        'status': 'ERROR',
        'errors': [],
        'report': None,
        'text': '',
        'total_time': 0
    }

    start_total = time.time()

    try:
        payload = json.loads(raw_bytes.decode('utf-8'))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        result['errors'].append(f'El archivo no es un JSON válido: {e}')
        return result

    try:
        invoice = Invoice.model_validate(payload)
    except ValidationError as e:
        result['errors'].append(f'La factura no tiene la estructura RIPS esperada: {e}')
        return result

    report = get_validation_engine().validate(invoice, profile)
    report = get_report_store().publish(report)

    result['report'] = report
    result['text'] = get_report_renderer().render_text(report)
    result['status'] = 'VALID' if report.is_valid else 'FINDINGS'
    result['total_time'] = round(time.time() - start_total, 2)
    return result


def display_status_badge(status: str, finding_count: int = 0):
    """Display status badge with appropriate color."""
    if status == 'VALID':
        st.success("✅ **Factura sin hallazgos**")
    elif status == 'FINDINGS':
        st.warning(f"⚠️ **{finding_count} hallazgo(s)**")
    else:
        st.error("🔴 **No se pudo validar la factura**")


# ==============================================================================
# MAIN APP UI
# ==============================================================================

st.title("🩺 Validador de facturas RIPS")
st.markdown("Suba el JSON de la factura para revisar duplicados, tipo de documento y diagnósticos.")
st.markdown("---")

with st.expander("ℹ️ Cómo usar", expanded=False):
    st.markdown("""
    1. **Elija el perfil** de reglas
    2. **Suba el archivo JSON** de la factura RIPS
    3. **Revise los hallazgos** y descargue el reporte

    - **Completo / PyP**: duplicados, documento según edad, finalidad y guía técnica
    - **Morbilidad**: duplicados y documento según edad
    """)

profile = st.selectbox(
    "Perfil de validación",
    options=list(RuleProfile),
    format_func=lambda p: PROFILE_LABELS[p]
)

uploaded_file = st.file_uploader(
    "Factura RIPS (JSON)",
    type=['json'],
    help="Archivo JSON con numFactura y usuarios"
)

if uploaded_file is not None:
    with st.spinner("Validando factura..."):
        result = process_invoice(uploaded_file.getvalue(), profile)

    report = result['report']

    st.subheader("📊 Resultado")
    display_status_badge(result['status'], len(report.findings) if report else 0)

    if result['errors']:
        for error in result['errors']:
            st.error(error)
    else:
        st.markdown(f"**Factura:** `{report.invoice_number}`  |  **Perfil:** `{report.profile.value}`")
        st.metric("Tiempo de validación", f"{result['total_time']}s")

        persistence = report.findings_by_code(ErrorCode.REPORT_PERSISTENCE_FAILURE)
        if persistence:
            st.warning(persistence[0].detail)

        if report.findings:
            st.markdown("---")
            st.subheader("📋 Hallazgos")
            st.dataframe(
                [
                    {
                        'Usuario': f.patient_sequence,
                        'Categoría': f.category,
                        'Fecha': f.date,
                        'Código': f.code,
                        'Detalle': f.detail,
                    }
                    for f in report.findings
                ],
                use_container_width=True
            )

        st.markdown("---")
        st.download_button(
            "⬇️ Descargar reporte",
            data=result['text'],
            file_name=report_filename(report.invoice_number),
            mime="text/plain"
        )

        with st.expander("🔧 Ver reporte (JSON)", expanded=False):
            st.json(json.loads(get_report_renderer().export_to_json(report)))

else:
    st.info("👆 Suba una factura para comenzar")

st.markdown("---")
st.caption("Validador RIPS - revisión previa a la radicación")
