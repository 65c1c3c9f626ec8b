# rips_validator/api/main.py
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from rips_validator.api.routers import factura_router

app = FastAPI(
    title="API de Validación RIPS",
    description="Valida facturas RIPS y devuelve un reporte de hallazgos en texto plano.",
    version="0.1.0"
)

# Configuración de CORS
origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173"
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(factura_router.router)


@app.get("/", tags=["Health Check"])
def read_root():
    return {"status": "ok", "message": "Validador RIPS en línea"}
