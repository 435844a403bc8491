# freelancmusic/main.py
import logging
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException

from .ai import BioAssist, default_generator
from .catalog import catalog_router
from .config import get_settings
from .models import BioRequest, BioResult


logging.basicConfig(
    level=get_settings().log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="FreelancMusic",
    description=(
        "Diretório de músicos freelancers: pesquisa, filtros, favoritos, "
        "cadastro de perfis e assistente de biografia com IA."
    ),
    version="1.0.0",
)
app.include_router(catalog_router)

_bio_assist: Optional[BioAssist] = None


def get_bio_assist() -> BioAssist:
    global _bio_assist
    if _bio_assist is None:
        _bio_assist = BioAssist(default_generator())
    return _bio_assist


@app.get("/")
def health_check():
    return {"status": "ok", "message": "FreelancMusic API live 🎷"}


@app.post("/api/bio", response_model=BioResult)
async def generate_bio_api(req: BioRequest, assist: BioAssist = Depends(get_bio_assist)):
    if not req.keywords.strip():
        raise HTTPException(status_code=400, detail="Palavras-chave vazias.")
    return await assist.request(req.keywords)


@app.get("/api/bio/{request_id}", response_model=BioResult)
def get_bio_api(request_id: str, assist: BioAssist = Depends(get_bio_assist)):
    result = assist.get(request_id)
    if result is None:
        raise HTTPException(status_code=404, detail="Bio request not found")
    return result
