"""
Word document utilities.
"""
import io

from docx import Document
from docx.shared import Pt

from utils.text_utils import normalize_dashes


def read_docx(data):
    """
    Read the text of a DOCX document, paragraphs first and then table cells.

    Args:
        data (bytes): Raw DOCX bytes

    Returns:
        str: Extracted text, one paragraph per line
    """
    doc = Document(io.BytesIO(data))
    lines = [paragraph.text for paragraph in doc.paragraphs]
    for table in doc.tables:
        for row in table.rows:
            cells = [cell.text.strip() for cell in row.cells if cell.text.strip()]
            if cells:
                lines.append(' | '.join(cells))
    return '\n'.join(lines)


def build_cover_letter_docx(content):
    """
    Render cover letter text into a DOCX document.

    Args:
        content (str): Cover letter text, paragraphs separated by blank lines

    Returns:
        bytes: DOCX document
    """
    doc = Document()

    style = doc.styles['Normal']
    font = style.font
    font.name = 'Calibri'
    font.size = Pt(11)

    for para in content.split('\n\n'):
        if para.strip():
            para_clean = normalize_dashes(para.replace('\n', ' ').strip())
            p = doc.add_paragraph(para_clean)
            p.paragraph_format.space_after = Pt(12)

    output = io.BytesIO()
    doc.save(output)
    return output.getvalue()
