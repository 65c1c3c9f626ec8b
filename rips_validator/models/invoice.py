"""
RIPS Invoice Data Models

Represents an invoice (factura) as submitted in the RIPS JSON format, with
its patients (usuarios) and their billed services. Models are frozen: rule
evaluation only reads them.
"""

from pydantic import BaseModel, Field, ConfigDict
from typing import ClassVar, List, Optional

from ..config.constants import LineKind


class RipsModel(BaseModel):
    """Common configuration for every RIPS record"""

    model_config = ConfigDict(
        populate_by_name=True,        # Accept both the RIPS keys and field names
        frozen=True,                  # Records are never mutated by the rules
        coerce_numbers_to_str=True,   # Some providers send codes as numbers
    )


class ServiceLine(RipsModel):
    """
    Fields shared by consultation and procedure lines.

    Invoices only ever hold the two concrete shapes below; a bare
    ServiceLine has no service code and no related diagnoses.
    """

    cod_prestador: Optional[str] = Field(None, alias="codPrestador")
    fecha_inicio_atencion: Optional[str] = Field(None, alias="fechaInicioAtencion")
    num_autorizacion: Optional[str] = Field(None, alias="numAutorizacion")
    modalidad_grupo_servicio: Optional[str] = Field(None, alias="modalidadGrupoServicioTecSal")
    grupo_servicios: Optional[str] = Field(None, alias="grupoServicios")
    cod_servicio: Optional[int] = Field(None, alias="codServicio")
    finalidad: Optional[str] = Field(None, alias="finalidadTecnologiaSalud")
    tipo_documento: Optional[str] = Field(None, alias="tipoDocumentoIdentificacion")
    num_documento: Optional[str] = Field(None, alias="numDocumentoIdentificacion")
    cod_diagnostico_principal: Optional[str] = Field(None, alias="codDiagnosticoPrincipal")
    vr_servicio: Optional[float] = Field(None, alias="vrServicio")
    concepto_recaudo: Optional[str] = Field(None, alias="conceptoRecaudo")
    valor_pago_moderador: Optional[float] = Field(None, alias="valorPagoModerador")
    consecutivo: Optional[int] = None

    kind: ClassVar[LineKind] = LineKind.CONSULTA

    @property
    def service_code(self) -> Optional[str]:
        """codConsulta or codProcedimiento, depending on the line kind"""
        return None

    @property
    def related_diagnoses(self) -> Optional[List[Optional[str]]]:
        """Related diagnoses, or None when the line shape has no such fields"""
        return None


class ConsultationLine(ServiceLine):
    """One billed consultation"""

    cod_consulta: Optional[str] = Field(None, alias="codConsulta")
    causa_motivo_atencion: Optional[str] = Field(None, alias="causaMotivoAtencion")
    tipo_diagnostico_principal: Optional[str] = Field(None, alias="tipoDiagnosticoPrincipal")
    cod_diagnostico_relacionado1: Optional[str] = Field(None, alias="codDiagnosticoRelacionado1")
    cod_diagnostico_relacionado2: Optional[str] = Field(None, alias="codDiagnosticoRelacionado2")

    kind: ClassVar[LineKind] = LineKind.CONSULTA

    @property
    def service_code(self) -> Optional[str]:
        return self.cod_consulta

    @property
    def related_diagnoses(self) -> Optional[List[Optional[str]]]:
        return [self.cod_diagnostico_relacionado1, self.cod_diagnostico_relacionado2]


class ProcedureLine(ServiceLine):
    """One billed procedure"""

    cod_procedimiento: Optional[str] = Field(None, alias="codProcedimiento")
    via_ingreso: Optional[str] = Field(None, alias="viaIngresoServicioSalud")

    kind: ClassVar[LineKind] = LineKind.PROCEDIMIENTO

    @property
    def service_code(self) -> Optional[str]:
        return self.cod_procedimiento


class Services(RipsModel):
    """Service lines billed for one patient"""

    consultas: Optional[List[ConsultationLine]] = None
    procedimientos: Optional[List[ProcedureLine]] = None


class Patient(RipsModel):
    """A covered individual (usuario) within an invoice"""

    tipo_documento: Optional[str] = Field(None, alias="tipoDocumentoIdentificacion")
    num_documento: Optional[str] = Field(None, alias="numDocumentoIdentificacion")
    tipo_usuario: Optional[str] = Field(None, alias="tipoUsuario")
    fecha_nacimiento: Optional[str] = Field(None, alias="fechaNacimiento")
    cod_sexo: Optional[str] = Field(None, alias="codSexo")
    cod_pais_residencia: Optional[str] = Field(None, alias="codPaisResidencia")
    cod_municipio_residencia: Optional[str] = Field(None, alias="codMunicipioResidencia")
    cod_zona_territorial: Optional[str] = Field(None, alias="codZonaTerritorialResidencia")
    incapacidad: Optional[str] = None
    consecutivo: int = 0
    cod_pais_origen: Optional[str] = Field(None, alias="codPaisOrigen")
    servicios: Optional[Services] = None


class Invoice(RipsModel):
    """
    A billing submission (factura) covering one or more patients.

    Exists only for the duration of one validation call.
    """

    num_documento_obligado: Optional[str] = Field(None, alias="numDocumentoIdObligado")
    num_factura: Optional[str] = Field(None, alias="numFactura")
    tipo_nota: Optional[str] = Field(None, alias="tipoNota")
    num_nota: Optional[str] = Field(None, alias="numNota")
    usuarios: Optional[List[Patient]] = None
