# [ Imports ]
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import cm
from reportlab.pdfgen import canvas
from reportlab.lib.colors import HexColor
from reportlab.lib.utils import ImageReader
from datetime import datetime
from io import BytesIO
from pathlib import Path
from xml.sax.saxutils import escape
import logging

# FORMATAÇÃO DE TEXTO (quebra de linha e justificação)
from reportlab.platypus import Paragraph
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.enums import TA_LEFT, TA_JUSTIFY, TA_CENTER

from sgci.utils.formatting import (
    format_currency,
    format_cpf_cnpj,
    format_cep,
    format_date_long,
    format_date_short,
)

# Configurar logging
logger = logging.getLogger(__name__)


# ==========================================
# CONFIGURAÇÕES DE DESIGN
# ==========================================
class ReceiptDesign:
    # Paleta de cores
    PRIMARY = '#000000'      # Preto (Textos)
    SECONDARY = '#B8860B'    # Ouro escuro (Linhas)
    ACCENT = '#1a237e'       # Azul profundo (Valor e Borda Interna)
    DARK = '#343a40'         # Cinza escuro
    LIGHT = '#ffffff'        # Branco
    GRAY = '#6c757d'         # Cinza
    BACKGROUND = '#FDFBF5'   # Fundo Marfim
    WARNING = '#8a6d3b'      # Caixa de dados bancários

    # Fontes clássicas
    FONT_BOLD = "Times-Bold"
    FONT_REGULAR = "Times-Roman"
    FONT_ITALIC = "Times-Italic"
    FONT_MONO = "Courier"

    # Margens
    MARGIN_LEFT = 2.2*cm
    MARGIN_RIGHT = 2.2*cm
    MARGIN_TOP = 2.0*cm
    MARGIN_BOTTOM = 2.0*cm

    # Espaçamentos
    SPACE_L = 1.0*cm
    SPACE_M = 0.7*cm
    SPACE_S = 0.5*cm
    SPACE_XS = 0.3*cm

    QR_SIZE = 3.2*cm


def content_width():
    return A4[0] - ReceiptDesign.MARGIN_LEFT - ReceiptDesign.MARGIN_RIGHT


def paragraph_style(name, **kwargs):
    """Estilo derivado do Normal, sem alterar a folha de estilos compartilhada"""
    base = getSampleStyleSheet()['Normal']
    options = {
        'fontName': ReceiptDesign.FONT_REGULAR,
        'fontSize': 11,
        'leading': 13,
        'textColor': HexColor(ReceiptDesign.DARK),
    }
    options.update(kwargs)
    return ParagraphStyle(name, parent=base, **options)


# ==========================================
# FUNÇÕES DE DESENHO
# ==========================================

def draw_refined_line(c, y_pos, x_start=None, x_end=None):
    """Linha dupla (grossa e fina)"""
    x_start = ReceiptDesign.MARGIN_LEFT if x_start is None else x_start
    x_end = A4[0] - ReceiptDesign.MARGIN_RIGHT if x_end is None else x_end
    c.setStrokeColor(HexColor(ReceiptDesign.SECONDARY))

    c.setLineWidth(2.0)  # Linha Grossa
    c.line(x_start, y_pos, x_end, y_pos)

    y_pos_fina = y_pos - 0.08*cm  # Linha Fina
    c.setLineWidth(0.5)
    c.line(x_start, y_pos_fina, x_end, y_pos_fina)

    return y_pos - 0.2*cm


def draw_double_border_box(c, x, y, width, height, radius=0.4*cm, fill_color=None):
    """Caixa arredondada com borda composta (ouro por fora, azul por dentro)"""
    c.setFillColor(HexColor(fill_color or ReceiptDesign.BACKGROUND))
    c.roundRect(x, y, width, height, radius, stroke=0, fill=1)

    c.setStrokeColor(HexColor(ReceiptDesign.SECONDARY))
    c.setLineWidth(2.0)
    c.roundRect(x, y, width, height, radius, stroke=1, fill=0)

    inset = 0.12*cm
    c.setStrokeColor(HexColor(ReceiptDesign.ACCENT))
    c.setLineWidth(0.8)
    c.roundRect(x + inset, y + inset, width - 2*inset, height - 2*inset, radius - inset/2, stroke=1, fill=0)


def draw_watermark(c):
    """Marca d'água diagonal"""
    c.saveState()
    c.translate(A4[0]/2, A4[1]/2)
    c.rotate(45)
    c.setFont(ReceiptDesign.FONT_BOLD, 110)
    c.setFillColor(HexColor('#e9ecef'))
    c.setFillAlpha(0.5)
    c.drawCentredString(0, 0, "RECIBO")
    c.restoreState()


def draw_header(c, data, company_data, y_position, logo_path=None):
    """Logo (opcional) e dados do emitente"""
    text_x_start = ReceiptDesign.MARGIN_LEFT
    logo_size = 2.2*cm
    bottom = y_position

    logo_file = Path(logo_path) if logo_path else None
    if logo_file and logo_file.exists():
        try:
            c.drawImage(str(logo_file), ReceiptDesign.MARGIN_LEFT, y_position - logo_size,
                        width=logo_size, height=logo_size,
                        mask='auto', preserveAspectRatio=True)
            text_x_start += logo_size + ReceiptDesign.SPACE_M
            bottom = y_position - logo_size
        except OSError as e:
            logger.warning(f"Não foi possível desenhar o logo: {e}")
    elif logo_file:
        logger.warning(f"Arquivo de logo não encontrado: {logo_file}")

    text_width = (A4[0] - ReceiptDesign.MARGIN_RIGHT) - text_x_start

    endereco = escape(data.endereco_emitente)
    cidade = company_data.get('cidade')
    uf = company_data.get('uf')
    if cidade:
        endereco += f" • {escape(cidade)}{f'/{escape(uf)}' if uf else ''}"

    text_content = (
        f"<font name='{ReceiptDesign.FONT_BOLD}' size=14>{escape(data.emitido_por.upper())}</font><br/>"
        f"<font size=10>CNPJ/CPF: {format_cpf_cnpj(data.cpf_emitente)}</font><br/>"
        f"<font size=9 color='{ReceiptDesign.GRAY}'>{endereco} • CEP {format_cep(data.cep_emitente)}</font><br/>"
        f"<font size=9 color='{ReceiptDesign.GRAY}'>Tel: {escape(data.telefone_emitente)} • {escape(data.email_emitente)}</font>"
    )

    p = Paragraph(text_content, paragraph_style('header', alignment=TA_CENTER, textColor=HexColor(ReceiptDesign.PRIMARY)))
    w, h = p.wrap(text_width, 6*cm)
    p.drawOn(c, text_x_start, y_position - h)

    bottom = min(bottom, y_position - h)
    current_y = draw_refined_line(c, bottom - ReceiptDesign.SPACE_S)

    return current_y - ReceiptDesign.SPACE_M


def draw_title(c, data, y_position):
    """Título centralizado, número e datas à direita"""
    c.setFont(ReceiptDesign.FONT_BOLD, 24)
    c.setFillColor(HexColor(ReceiptDesign.PRIMARY))
    c.drawCentredString(A4[0] / 2, y_position - 0.4*cm, "RECIBO DE PAGAMENTO")

    right_x = A4[0] - ReceiptDesign.MARGIN_RIGHT
    c.setFont(ReceiptDesign.FONT_BOLD, 10)
    c.setFillColor(HexColor(ReceiptDesign.ACCENT))
    c.drawRightString(right_x, y_position + 0.2*cm, f"Nº {data.numero}")

    c.setFont(ReceiptDesign.FONT_REGULAR, 9)
    c.setFillColor(HexColor(ReceiptDesign.GRAY))
    c.drawRightString(right_x, y_position - 0.25*cm, f"Pagamento: {format_date_short(data.data)}")
    if data.data_emissao:
        c.drawRightString(right_x, y_position - 0.65*cm, f"Emissão: {format_date_short(data.data_emissao)}")

    line_y = draw_refined_line(c, y_position - 1.0*cm)
    return line_y - ReceiptDesign.SPACE_M


def draw_payer_info(c, data, y_position):
    """Pagador e documento"""
    texto = (
        f"Recebemos de <b>{escape(data.recebido_de.upper())}</b>, inscrito(a) no CPF/CNPJ sob o nº "
        f"<b>{format_cpf_cnpj(data.cpf_cnpj)}</b>, a importância descrita abaixo:"
    )
    p = Paragraph(texto, paragraph_style('payer', fontSize=12, leading=15, alignment=TA_JUSTIFY))
    w, h = p.wrap(content_width(), 4*cm)
    p.drawOn(c, ReceiptDesign.MARGIN_LEFT, y_position - h)

    return y_position - h - ReceiptDesign.SPACE_M


def draw_amount(c, data, y_position):
    """Caixa de valor com valor por extenso"""
    largura = A4[0]
    container_height = 2.6*cm
    box_y = y_position - container_height

    draw_double_border_box(c, ReceiptDesign.MARGIN_LEFT, box_y, content_width(), container_height)

    # Valor numérico
    c.setFont(ReceiptDesign.FONT_BOLD, 30)
    c.setFillColor(HexColor(ReceiptDesign.ACCENT))
    c.drawCentredString(largura / 2, y_position - 1.25*cm, format_currency(data.valor))

    # Valor por extenso
    c.setFont(ReceiptDesign.FONT_ITALIC, 11)
    c.setFillColor(HexColor(ReceiptDesign.DARK))
    c.drawCentredString(largura / 2, y_position - 2.05*cm, f"({data.valor_extenso})")

    return box_y - ReceiptDesign.SPACE_M


def build_payment_text(data) -> str:
    """Parágrafo descritivo do pagamento"""
    partes = [
        f"O referido valor é referente a \"{escape(data.referente)}\", "
        f"com pagamento por meio de {escape(data.forma_pagamento)} em {format_date_long(data.data)}."
    ]

    detalhes = []
    if data.empreendimento_nome:
        empreendimento = escape(data.empreendimento_nome)
        if data.empreendimento_unidade:
            empreendimento += f" · {escape(data.empreendimento_unidade)}"
        detalhes.append(f"Empreendimento: {empreendimento}")
    if data.numero_lote:
        detalhes.append(f"Lote: {escape(data.numero_lote)}")
    if data.empreendimento_metragem:
        detalhes.append(f"Área: {data.empreendimento_metragem:g} m²")
    if data.empreendimento_fase:
        detalhes.append(f"Fase: {escape(data.empreendimento_fase)}")
    if data.numero_parcela:
        total = f" de {data.total_parcelas}" if data.total_parcelas else ""
        detalhes.append(f"Parcela: {data.numero_parcela}{total}")
    if data.corretor_nome:
        creci = f" (CRECI {escape(data.corretor_creci)})" if data.corretor_creci else ""
        detalhes.append(f"Corretor: {escape(data.corretor_nome)}{creci}")
    if detalhes:
        partes.append(" " + "; ".join(detalhes) + ".")

    if data.status == "Pendente":
        partes.append(
            f" <b>Parcela em aberto</b>, com vencimento em {format_date_short(data.data)}; "
            "a quitação se dará com a compensação do pagamento."
        )
    else:
        partes.append(" Pelo que damos plena, geral e irrevogável quitação do valor recebido.")

    return "".join(partes)


def draw_payment_details(c, data, y_position):
    """Detalhes do pagamento, justificado"""
    p = Paragraph(build_payment_text(data), paragraph_style('details', fontSize=11, leading=14, alignment=TA_JUSTIFY))
    w, h = p.wrap(content_width(), 10*cm)
    p.drawOn(c, ReceiptDesign.MARGIN_LEFT, y_position - h)

    return y_position - h - ReceiptDesign.SPACE_M


def draw_bank_details(c, data, y_position):
    """Dados para depósito/transferência (apenas recibos pendentes)"""
    linhas = [
        f"<b>Banco:</b> {escape(data.banco_nome or '-')}",
        f"<b>Agência:</b> {escape(data.banco_agencia or '-')} &nbsp;&nbsp; <b>Conta:</b> {escape(data.banco_conta or '-')}"
        f" &nbsp;&nbsp; <b>Tipo:</b> {escape(data.banco_tipo_conta or '-')}",
        f"<b>Favorecido:</b> {escape(data.emitido_por)} &nbsp;&nbsp; <b>CNPJ:</b> {format_cpf_cnpj(data.cpf_emitente)}",
    ]
    texto = f"<font name='{ReceiptDesign.FONT_BOLD}' size=11>DADOS PARA TRANSFERÊNCIA</font><br/>" + "<br/>".join(linhas)

    inner_width = content_width() - 0.8*cm
    p = Paragraph(texto, paragraph_style('bank', fontSize=10, leading=13, alignment=TA_LEFT))
    w, h = p.wrap(inner_width, 6*cm)

    box_height = h + 0.6*cm
    box_y = y_position - box_height
    draw_double_border_box(c, ReceiptDesign.MARGIN_LEFT, box_y, content_width(), box_height, radius=0.25*cm)
    p.drawOn(c, ReceiptDesign.MARGIN_LEFT + 0.4*cm, box_y + 0.3*cm)

    return box_y - ReceiptDesign.SPACE_M


def draw_qr_block(c, png_bytes, x, y_top, title, text, text_width):
    """QR à esquerda, título e texto à direita"""
    size = ReceiptDesign.QR_SIZE
    c.drawImage(ImageReader(BytesIO(png_bytes)), x, y_top - size, width=size, height=size)

    texto = f"<font name='{ReceiptDesign.FONT_BOLD}' size=9>{escape(title)}</font><br/>{text}"
    p = Paragraph(texto, paragraph_style('qr', fontSize=7, leading=8.5, alignment=TA_LEFT))
    w, h = p.wrap(text_width, size + 2*cm)
    p.drawOn(c, x + size + 0.25*cm, y_top - h)

    return y_top - max(size, h)


def draw_qr_section(c, qr_payload, qr_images, y_position):
    """QR de verificação (sempre) e QR PIX (quando houver payload)"""
    half = content_width() / 2
    text_width = half - ReceiptDesign.QR_SIZE - 0.5*cm

    hash_value = qr_payload.hash
    link = qr_payload.share_url or qr_payload.verify_url
    verification_text = (
        "Escaneie para conferir a autenticidade deste recibo.<br/>"
        f"<font name='{ReceiptDesign.FONT_MONO}' size=6>SHA-256: {hash_value}</font><br/>"
        f"{escape(link)}"
    )
    bottom = draw_qr_block(c, qr_images["verification"], ReceiptDesign.MARGIN_LEFT, y_position,
                           "VERIFICAÇÃO DE AUTENTICIDADE", verification_text, text_width)

    if qr_images.get("pix") and qr_payload.pix_payload:
        pix_text = (
            f"Chave: {escape(qr_payload.pix_key or '-')}<br/>"
            f"<font name='{ReceiptDesign.FONT_MONO}' size=5.5>{escape(qr_payload.pix_payload)}</font>"
        )
        pix_bottom = draw_qr_block(c, qr_images["pix"], ReceiptDesign.MARGIN_LEFT + half, y_position,
                                   "PAGUE COM PIX (COPIA E COLA)", pix_text, text_width)
        bottom = min(bottom, pix_bottom)

    return bottom - ReceiptDesign.SPACE_M


def draw_footer(c, data, company_data, y_position):
    """Local, data e assinatura"""
    largura = A4[0]
    centro_x = largura / 2

    cidade = company_data.get('cidade') or 'Cidade'
    uf = company_data.get('uf') or 'UF'
    data_emissao = data.data_emissao or datetime.now().date().isoformat()
    c.setFont(ReceiptDesign.FONT_REGULAR, 11)
    c.setFillColor(HexColor(ReceiptDesign.DARK))
    c.drawCentredString(centro_x, y_position, f"{cidade} ({uf}), {format_date_long(data_emissao)}.")

    # Linha de assinatura
    line_y = draw_refined_line(c, y_position - ReceiptDesign.SPACE_L, x_start=5.5*cm, x_end=largura - 5.5*cm)

    current_y = line_y - ReceiptDesign.SPACE_S
    c.setFont(ReceiptDesign.FONT_BOLD, 13)
    c.setFillColor(HexColor(ReceiptDesign.PRIMARY))
    c.drawCentredString(centro_x, current_y, data.emitido_por.upper())

    current_y -= ReceiptDesign.SPACE_S * 0.8
    c.setFont(ReceiptDesign.FONT_REGULAR, 9)
    c.setFillColor(HexColor(ReceiptDesign.GRAY))
    c.drawCentredString(centro_x, current_y, f"CNPJ/CPF: {format_cpf_cnpj(data.cpf_emitente)}")

    if data.emitido_por_nome:
        current_y -= ReceiptDesign.SPACE_S * 0.8
        c.drawCentredString(centro_x, current_y, f"Emitido por: {data.emitido_por_nome}")

    return current_y


def draw_document_code(c, code):
    """Código do documento no rodapé"""
    c.setFont(ReceiptDesign.FONT_REGULAR, 7)
    c.setFillColor(HexColor(ReceiptDesign.GRAY))
    c.drawCentredString(A4[0] / 2, ReceiptDesign.MARGIN_BOTTOM / 2, code)


def _draw_article(c, current_y, number, text, style, text_x_start, text_width):
    box_width = 1.8*cm
    box_height = 0.5*cm

    c.setFillColor(HexColor(ReceiptDesign.ACCENT))
    c.roundRect(ReceiptDesign.MARGIN_LEFT, current_y - box_height, box_width, box_height, 0.1*cm, stroke=0, fill=1)

    c.setFillColor(HexColor(ReceiptDesign.LIGHT))
    c.setFont(ReceiptDesign.FONT_BOLD, 8)
    c.drawCentredString(ReceiptDesign.MARGIN_LEFT + box_width / 2, current_y - box_height / 2 - 0.1*cm, number)

    p = Paragraph(text, style)
    w, h = p.wrap(text_width, 10*cm)
    p.drawOn(c, text_x_start, current_y - h)

    return current_y - max(box_height, h) - 0.2*cm


def draw_legal_articles(c):
    """Artigos 319 e 320 do Código Civil, acima do código do documento"""
    largura = A4[0]
    current_y = ReceiptDesign.MARGIN_BOTTOM / 2 + 1.9*cm

    text_x_start = ReceiptDesign.MARGIN_LEFT + 1.8*cm + 0.3*cm
    text_width = (largura - ReceiptDesign.MARGIN_RIGHT) - text_x_start

    style = paragraph_style('law', fontName=ReceiptDesign.FONT_ITALIC, fontSize=7, leading=9,
                            alignment=TA_JUSTIFY, textColor=HexColor(ReceiptDesign.GRAY))

    current_y = _draw_article(
        c, current_y, "Art. 319.",
        "O devedor que paga tem direito a quitação regular, e pode reter o pagamento, enquanto não lhe seja dada.",
        style, text_x_start, text_width
    )
    _draw_article(
        c, current_y, "Art. 320.",
        "A quitação, que sempre poderá ser dada por instrumento particular, designará o valor e a espécie da "
        "dívida quitada, o nome do devedor, ou quem por este pagou, o tempo e o lugar do pagamento, com a "
        "assinatura do credor, ou do seu representante.",
        style, text_x_start, text_width
    )


# ==========================================
# FUNÇÃO PRINCIPAL (GERADOR)
# ==========================================

async def generate_receipt_pdf(data, qr_payload, qr_images: dict, company_data: dict = None, logo_path: str = None) -> bytes:
    """
    Gera o PDF do recibo assinado.

    data: ReceiptData saneado e validado
    qr_payload: QrPayload (hash, links e PIX)
    qr_images: {"verification": png, "pix": png | None}
    """
    company_data = company_data or {}
    buffer = BytesIO()

    c = canvas.Canvas(buffer, pagesize=A4)
    c.setTitle(f"Recibo {data.numero}")
    c.setAuthor(data.emitido_por)
    altura = A4[1]

    try:
        y_pos = altura - ReceiptDesign.MARGIN_TOP

        draw_watermark(c)
        y_pos = draw_header(c, data, company_data, y_pos, logo_path=logo_path)
        y_pos = draw_title(c, data, y_pos)
        y_pos = draw_payer_info(c, data, y_pos)
        y_pos = draw_amount(c, data, y_pos)
        y_pos = draw_payment_details(c, data, y_pos)

        if data.status == "Pendente" and data.banco_nome:
            y_pos = draw_bank_details(c, data, y_pos)

        y_pos = draw_qr_section(c, qr_payload, qr_images, y_pos)
        draw_footer(c, data, company_data, y_pos)
        draw_legal_articles(c)
        draw_document_code(c, f"Documento {data.numero} • Hash {qr_payload.hash}")

        c.showPage()
        c.save()

        pdf_bytes = buffer.getvalue()
        logger.info(f"Recibo {data.numero} gerado - Valor: {format_currency(data.valor)} ({len(pdf_bytes)} bytes)")
        return pdf_bytes

    except Exception as e:
        logger.error(f"Erro ao gerar PDF do recibo {data.numero}: {str(e)}")
        raise
    finally:
        buffer.close()
