"""
S.G.C.I. - CEP API
"""
from fastapi import APIRouter

from sgci.services.cep import lookup_cep

router = APIRouter(prefix="/cep", tags=["CEP"])


@router.get("/{cep}")
async def get_address(cep: str):
    """Endereço do CEP via ViaCEP"""
    return await lookup_cep(cep)
