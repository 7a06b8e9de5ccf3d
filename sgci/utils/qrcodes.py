"""
Geração das imagens de QR Code (verificação do recibo e PIX copia e cola)
"""
import io
import json
import logging

import qrcode
from qrcode.constants import ERROR_CORRECT_M

logger = logging.getLogger(__name__)


def generate_qr_png(content: str, box_size: int = 8, border: int = 1) -> bytes:
    """Renderiza o conteúdo em um PNG"""
    qr = qrcode.QRCode(box_size=box_size, border=border, error_correction=ERROR_CORRECT_M)
    qr.add_data(content)
    qr.make(fit=True)
    img = qr.make_image(fill_color="black", back_color="white")

    buffered = io.BytesIO()
    img.save(buffered, format="PNG")
    return buffered.getvalue()


def verification_qr_content(qr_payload) -> str:
    """Link de compartilhamento quando existe, senão o link de verificação"""
    if qr_payload.share_url:
        return qr_payload.share_url
    if qr_payload.verify_url:
        return qr_payload.verify_url
    return json.dumps(qr_payload.model_dump(by_alias=True), ensure_ascii=False)


def generate_receipt_qr_images(qr_payload) -> dict:
    """
    Gera os QR Codes do recibo.
    Retorna {"verification": bytes, "pix": bytes | None}
    """
    images = {"verification": generate_qr_png(verification_qr_content(qr_payload)), "pix": None}

    if qr_payload.pix_payload:
        images["pix"] = generate_qr_png(qr_payload.pix_payload)

    logger.info(f"QR Codes gerados para o recibo {qr_payload.numero} (pix={'sim' if images['pix'] else 'não'})")
    return images
