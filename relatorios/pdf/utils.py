# relatorios/pdf/utils.py
from xml.sax.saxutils import escape as xml_escape


def sanitize_for_paragraph(text):
    """Escapa o texto para o mini-HTML do Paragraph e preserva quebras de linha."""
    if text is None:
        return ''
    txt = str(text)
    txt = txt.replace('\r\n', '\n').replace('\r', '\n')
    return xml_escape(txt).replace('\n', '<br/>')
